"""
HireLane API: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Autouse:
    └── reset_rate_limiter: empties the process-wide rate-limit store

    Function-scoped:
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── fake_clock: Controllable monotonic clock for the rate limiter
    ├── sample_session / signed_in: An authenticated caller
    ├── override_db: Routes get mock_db_session instead of a real session
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os

# Must run before any hirelane import: settings and the engine read these at import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["APP_URL"] = "http://app.test"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from hirelane.auth import Session  # noqa: E402
from hirelane.middleware.rate_limit import rate_limiter  # noqa: E402
from hirelane.models.question_bank import QuestionBank  # noqa: E402


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_session():
    return Session(
        user_id="user-1",
        email="recruiter@acme.test",
        role="company_admin",
        tenant_id="acme",
    )


@pytest.fixture
def signed_in(sample_session):
    """Session provider that always returns sample_session."""

    async def provider(request):
        return sample_session

    return provider


@pytest.fixture
def make_bank():
    """Factory for fully-populated QuestionBank rows."""

    def factory(**overrides):
        now = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)
        values = {
            "id": uuid4(),
            "company_id": "acme",
            "created_by": "user-1",
            "name": "Backend Engineering",
            "description": "Core backend questions",
            "category": "technical",
            "sub_category": "python",
            "tags": ["python", "sql"],
            "is_active": True,
            "is_public": False,
            "is_template": False,
            "usage_count": 0,
            "last_used_at": None,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return QuestionBank(**values)

    return factory


@pytest.fixture
def override_db(mock_db_session):
    """Make every route that depends on get_db_session receive mock_db_session."""
    from hirelane.database import get_db_session
    from hirelane.main import app

    async def _session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _session
    yield mock_db_session
    app.dependency_overrides.pop(get_db_session, None)


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient bound to the application (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from hirelane.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
