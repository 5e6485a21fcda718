"""
HireLane API: Question Bank Route Tests
=========================================

The session provider and the service are patched; the wrapper, routing and
envelopes are real.
"""

import base64
import json
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from itsdangerous import TimestampSigner

from hirelane.auth import Session
from hirelane.config import settings
from hirelane.exceptions import NotFoundError
from hirelane.routes.question_banks import SEARCH_MAX_LENGTH
from hirelane.schemas.question_bank import QuestionBankDetail, QuestionBankItem

BANKS_URL = "/api/content/question-banks"


def _item(**overrides):
    values = {
        "id": uuid4(),
        "name": "Backend",
        "category": "technical",
        "is_active": True,
        "is_public": False,
        "is_template": False,
        "created_at": "2026-01-15T09:30:00Z",
        "updated_at": "2026-01-15T09:30:00Z",
    }
    values.update(overrides)
    return QuestionBankItem(**values)


@pytest.fixture
def as_user(sample_session):
    with patch("hirelane.api.wrapper.get_session", AsyncMock(return_value=sample_session)):
        yield sample_session


@pytest.fixture
def service():
    with patch("hirelane.routes.question_banks.question_bank_service") as mock_service:
        mock_service.list_banks = AsyncMock()
        mock_service.get_bank = AsyncMock()
        mock_service.create_bank = AsyncMock()
        mock_service.update_bank = AsyncMock()
        mock_service.delete_bank = AsyncMock()
        yield mock_service


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_anonymous_request_is_rejected(self, test_client, override_db, service):
        response = await test_client.get(BANKS_URL)

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
        service.list_banks.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signed_session_cookie_is_accepted(self, test_client, override_db, service):
        service.list_banks.return_value = []
        user = {"userId": "user-1", "email": "recruiter@acme.test", "tenantId": "acme"}
        payload = base64.b64encode(json.dumps({"user": user}).encode("utf-8"))
        cookie = TimestampSigner(settings.session_secret_key).sign(payload).decode("utf-8")

        response = await test_client.get(
            BANKS_URL, headers={"Cookie": f"{settings.session_cookie}={cookie}"}
        )

        assert response.status_code == 200
        service.list_banks.assert_awaited_once()
        assert service.list_banks.call_args.args[1] == "acme"


class TestListAndDetail:

    @pytest.mark.asyncio
    async def test_list_returns_camel_case_items(self, test_client, override_db, as_user, service):
        service.list_banks.return_value = [_item(question_count=3, sub_category="python")]

        response = await test_client.get(BANKS_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"][0]["questionCount"] == 3
        assert body["data"][0]["subCategory"] == "python"
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_list_without_company_is_empty(self, test_client, override_db, service):
        with patch("hirelane.api.wrapper.get_session", AsyncMock(return_value=Session(email="a@b.test"))):
            response = await test_client.get(BANKS_URL)

        assert response.json() == {"success": True, "data": []}
        service.list_banks.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_detail_passes_filters(self, test_client, override_db, as_user, service):
        bank_id = uuid4()
        service.get_bank.return_value = QuestionBankDetail(bank=_item(id=bank_id))

        response = await test_client.get(
            f"{BANKS_URL}/{bank_id}", params={"questionType": "coding", "search": "list"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["bank"]["id"] == str(bank_id)
        kwargs = service.get_bank.call_args.kwargs
        assert kwargs["company_id"] == "acme"
        assert kwargs["bank_id"] == bank_id
        assert kwargs["question_type"] == "coding"
        assert kwargs["search"] == "list"

    @pytest.mark.asyncio
    async def test_detail_not_found(self, test_client, override_db, as_user, service):
        service.get_bank.side_effect = NotFoundError(resource="question_bank", message="Question bank not found")

        response = await test_client.get(f"{BANKS_URL}/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body == {
            "success": False,
            "error": "Question bank not found",
            "requestId": response.headers["X-Request-ID"],
        }


class TestCreate:

    @pytest.mark.asyncio
    async def test_create(self, test_client, override_db, as_user, service):
        service.create_bank.return_value = _item(name="System Design", question_count=0)

        response = await test_client.post(
            BANKS_URL, json={"name": "System Design", "category": "technical", "isPublic": True}
        )

        assert response.status_code == 201
        assert response.json()["data"]["name"] == "System Design"
        payload = service.create_bank.call_args.kwargs["payload"]
        assert payload.is_public is True
        assert service.create_bank.call_args.kwargs["user_id"] == "user-1"

    @pytest.mark.asyncio
    async def test_create_requires_name_and_category(self, test_client, override_db, as_user, service):
        response = await test_client.post(BANKS_URL, json={"name": "System Design"})

        assert response.status_code == 400
        assert response.json()["error"] == "Name and category are required"
        service.create_bank.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_is_rate_limited(self, test_client, override_db, as_user, service):
        service.create_bank.return_value = _item()
        body = {"name": "Backend", "category": "technical"}

        statuses = [(await test_client.post(BANKS_URL, json=body)).status_code for _ in range(30)]
        limited = await test_client.post(BANKS_URL, json=body)

        assert statuses == [201] * 30
        assert limited.status_code == 429
        assert 1 <= limited.json()["retryAfter"] <= 60
        assert service.create_bank.await_count == 30

    @pytest.mark.asyncio
    async def test_create_without_company(self, test_client, override_db, service):
        with patch("hirelane.api.wrapper.get_session", AsyncMock(return_value=Session(email="a@b.test"))):
            response = await test_client.post(BANKS_URL, json={"name": "X", "category": "technical"})

        assert response.status_code == 400
        assert response.json()["error"] == "Required fields missing"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_update(self, test_client, override_db, as_user, service):
        bank_id = uuid4()
        service.update_bank.return_value = _item(id=bank_id, name="Renamed")

        response = await test_client.put(
            f"{BANKS_URL}/{bank_id}", json={"name": "Renamed", "category": "technical"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed"
        assert service.update_bank.call_args.kwargs["bank_id"] == bank_id

    @pytest.mark.asyncio
    async def test_delete(self, test_client, override_db, as_user, service):
        bank_id = uuid4()
        service.delete_bank.return_value = _item(id=bank_id, is_active=False)

        response = await test_client.delete(f"{BANKS_URL}/{bank_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Question bank deleted successfully"
        assert body["data"]["isActive"] is False

    @pytest.mark.asyncio
    async def test_delete_without_company(self, test_client, override_db, service):
        with patch("hirelane.api.wrapper.get_session", AsyncMock(return_value=Session(email="a@b.test"))):
            response = await test_client.delete(f"{BANKS_URL}/{uuid4()}")

        assert response.status_code == 400
        assert response.json()["error"] == "Company ID not found"
        service.delete_bank.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_service_failure_is_500_with_details(self, test_client, override_db, as_user, service):
        service.delete_bank.side_effect = RuntimeError("pool exhausted")

        response = await test_client.delete(f"{BANKS_URL}/{uuid4()}")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        # ENVIRONMENT=test is not production
        assert body["details"] == "pool exhausted"


class TestMalformedParameters:
    """Path and query values are parsed inside the handler, after the gates."""

    @pytest.mark.asyncio
    async def test_anonymous_bad_id_is_unauthorized(self, test_client, override_db, service):
        response = await test_client.get(f"{BANKS_URL}/not-a-uuid")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "Unauthorized",
            "requestId": response.headers["X-Request-ID"],
        }
        service.get_bank.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anonymous_long_search_is_unauthorized(self, test_client, override_db, service):
        response = await test_client.get(
            f"{BANKS_URL}/{uuid4()}", params={"search": "x" * (SEARCH_MAX_LENGTH + 1)}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_signed_in_bad_id_is_not_found(self, test_client, override_db, as_user, service):
        response = await test_client.delete(f"{BANKS_URL}/not-a-uuid")

        assert response.status_code == 404
        assert response.json()["error"] == "Question bank not found"
        service.delete_bank.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_long_search_is_rejected_with_field(
        self, test_client, override_db, as_user, service, caplog
    ):
        with caplog.at_level("WARNING", logger="hirelane.api"):
            response = await test_client.get(
                f"{BANKS_URL}/{uuid4()}", params={"search": "x" * (SEARCH_MAX_LENGTH + 1)}
            )

        assert response.status_code == 400
        assert response.json()["error"] == f"Search term must be at most {SEARCH_MAX_LENGTH} characters"
        assert "'field': 'search'" in caplog.text
        service.get_bank.assert_not_awaited()


class TestCommitFailure:
    """Real service, mocked session: the commit happens before the response."""

    @pytest.mark.asyncio
    async def test_failed_commit_on_create_is_500(self, test_client, override_db, as_user):
        override_db.commit.side_effect = RuntimeError("could not serialize access")

        response = await test_client.post(BANKS_URL, json={"name": "Backend", "category": "technical"})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Failed to create question bank"
        override_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_commit_on_delete_is_500(self, test_client, override_db, as_user, make_bank):
        result = MagicMock()
        result.scalar_one_or_none.return_value = make_bank()
        override_db.execute.return_value = result
        override_db.commit.side_effect = RuntimeError("connection reset")

        response = await test_client.delete(f"{BANKS_URL}/{uuid4()}")

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to delete question bank"
