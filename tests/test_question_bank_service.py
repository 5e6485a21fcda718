"""
HireLane API: Question Bank Service Unit Tests
================================================

What we test:
    ✅ Listing returns items with question counts
    ✅ Detail returns the bank and its questions; NotFoundError when missing
    ✅ Create / update / soft delete mutate the row and commit before returning
    ✅ Database failures roll back and raise DatabaseError
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from hirelane.exceptions import DatabaseError, NotFoundError
from hirelane.models.question_bank import Question
from hirelane.schemas.question_bank import QuestionBankPayload
from hirelane.services.question_bank_service import QuestionBankService


def _scalar_result(row):
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    return result


def _scalars_result(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


def _question(bank_id, question_type="coding", text="Reverse a linked list"):
    return Question(
        id=uuid4(),
        question_bank_id=bank_id,
        company_id="acme",
        question_type=question_type,
        question=text,
        is_active=True,
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
    )


class TestListBanks:

    def setup_method(self):
        self.service = QuestionBankService()

    @pytest.mark.asyncio
    async def test_returns_items_with_counts(self, mock_db_session, make_bank):
        first, second = make_bank(name="Backend"), make_bank(name="Frontend")
        result = MagicMock()
        result.all.return_value = [(first, 4), (second, 0)]
        mock_db_session.execute.return_value = result

        items = await self.service.list_banks(mock_db_session, "acme")

        assert [(i.name, i.question_count) for i in items] == [("Backend", 4), ("Frontend", 0)]
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_database_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_banks(mock_db_session, "acme")

        assert exc_info.value.message == "Failed to fetch question banks"


class TestGetBank:

    def setup_method(self):
        self.service = QuestionBankService()

    @pytest.mark.asyncio
    async def test_returns_bank_and_questions(self, mock_db_session, make_bank):
        bank = make_bank()
        questions = [_question(bank.id), _question(bank.id, "behavioral", "Tell me about a conflict")]
        mock_db_session.execute = AsyncMock(
            side_effect=[_scalar_result(bank), _scalars_result(questions)]
        )

        detail = await self.service.get_bank(mock_db_session, "acme", bank.id, question_type="all", search="list")

        assert detail.bank.id == bank.id
        assert detail.bank.question_count is None
        assert [q.question_type for q in detail.questions] == ["coding", "behavioral"]
        assert mock_db_session.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_bank_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_bank(mock_db_session, "acme", uuid4())

        assert exc_info.value.message == "Question bank not found"


class TestMutations:

    def setup_method(self):
        self.service = QuestionBankService()
        self.payload = QuestionBankPayload(
            name="System Design",
            category="technical",
            description="",
            tags=["scaling"],
            is_public=True,
        )

    @pytest.mark.asyncio
    async def test_create_adds_and_commits(self, mock_db_session):
        item = await self.service.create_bank(mock_db_session, "acme", "user-1", self.payload)

        added = mock_db_session.add.call_args.args[0]
        assert added.company_id == "acme"
        assert added.created_by == "user-1"
        assert added.description is None
        assert added.is_active is True
        mock_db_session.commit.assert_awaited_once()
        assert item.name == "System Design"
        assert item.question_count == 0

    @pytest.mark.asyncio
    async def test_create_failure_rolls_back(self, mock_db_session):
        mock_db_session.commit.side_effect = RuntimeError("unique violation")

        with pytest.raises(DatabaseError):
            await self.service.create_bank(mock_db_session, "acme", "user-1", self.payload)

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_changes_fields(self, mock_db_session, make_bank):
        bank = make_bank()
        before = bank.updated_at
        mock_db_session.execute.return_value = _scalar_result(bank)

        item = await self.service.update_bank(mock_db_session, "acme", bank.id, self.payload)

        assert bank.name == "System Design"
        assert bank.is_public is True
        assert bank.updated_at > before
        assert item.tags == ["scaling"]
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_missing_bank(self, mock_db_session):
        mock_db_session.execute.return_value = _scalar_result(None)

        with pytest.raises(NotFoundError):
            await self.service.update_bank(mock_db_session, "acme", uuid4(), self.payload)

        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, mock_db_session, make_bank):
        bank = make_bank()
        mock_db_session.execute.return_value = _scalar_result(bank)

        item = await self.service.delete_bank(mock_db_session, "acme", bank.id)

        assert bank.is_active is False
        assert item.is_active is False
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_commit_failure_rolls_back(self, mock_db_session, make_bank):
        mock_db_session.execute.return_value = _scalar_result(make_bank())
        mock_db_session.commit.side_effect = RuntimeError("deadlock")

        with pytest.raises(DatabaseError):
            await self.service.delete_bank(mock_db_session, "acme", uuid4())

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_commit_failure_rolls_back(self, mock_db_session, make_bank):
        bank = make_bank()
        mock_db_session.execute.return_value = _scalar_result(bank)
        mock_db_session.commit.side_effect = RuntimeError("serialization failure")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.update_bank(mock_db_session, "acme", bank.id, self.payload)

        assert exc_info.value.message == "Failed to update question bank"
        mock_db_session.rollback.assert_awaited_once()
