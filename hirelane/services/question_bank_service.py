"""
HireLane API: Question Bank Service
=====================================

What:  Company-scoped CRUD over question banks and read access to their questions.
How:   Stateless; every method receives the request's AsyncSession and the
       caller's company id, and every query filters on that company id.
Who:   Called by the wrapped handlers in hirelane.routes.question_banks.

Error Handling Strategy:
    Missing rows become NotFoundError (404). Any other failure is logged,
    the session is rolled back, and DatabaseError (500, generic message) is
    raised. The rollback happens here because the wrapper renders the error
    itself, so the session dependency never sees the exception.

    Mutations commit before returning: the dependency teardown runs after
    the response is sent, too late to turn a failed commit into a 500.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hirelane.exceptions import DatabaseError, HireLaneError, NotFoundError
from hirelane.models.question_bank import Question, QuestionBank
from hirelane.schemas.question_bank import (
    QuestionBankDetail,
    QuestionBankItem,
    QuestionBankPayload,
    QuestionItem,
)

logger = logging.getLogger(__name__)


def _to_item(bank: QuestionBank, question_count: Optional[int] = None) -> QuestionBankItem:
    return QuestionBankItem(
        id=bank.id,
        name=bank.name,
        description=bank.description,
        category=bank.category,
        sub_category=bank.sub_category,
        tags=bank.tags,
        is_active=bank.is_active,
        is_public=bank.is_public,
        is_template=bank.is_template,
        question_count=question_count,
        usage_count=bank.usage_count,
        last_used_at=bank.last_used_at,
        created_at=bank.created_at,
        updated_at=bank.updated_at,
    )


def _to_question(question: Question) -> QuestionItem:
    return QuestionItem(
        id=question.id,
        question_bank_id=question.question_bank_id,
        question_type=question.question_type,
        question=question.question,
        created_at=question.created_at,
    )


class QuestionBankService:

    async def list_banks(self, db: AsyncSession, company_id: str) -> List[QuestionBankItem]:
        """Active banks of the company with their active question counts, newest first."""
        question_count = func.count(Question.id).label("question_count")
        query = (
            select(QuestionBank, question_count)
            .outerjoin(
                Question,
                and_(Question.question_bank_id == QuestionBank.id, Question.is_active.is_(True)),
            )
            .where(QuestionBank.company_id == company_id, QuestionBank.is_active.is_(True))
            .group_by(QuestionBank.id)
            .order_by(desc(QuestionBank.created_at))
        )
        try:
            result = await db.execute(query)
            rows = result.all()
        except Exception as e:
            logger.error("Database error listing question banks: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch question banks",
                context={"company_id": company_id, "error_type": type(e).__name__},
            )
        return [_to_item(bank, count) for bank, count in rows]

    async def get_bank(
        self,
        db: AsyncSession,
        company_id: str,
        bank_id: uuid.UUID,
        question_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> QuestionBankDetail:
        """
        A bank and its active questions.

        Filters:
            question_type: exact match; "all" or empty disables the filter
            search:        case-insensitive substring of the question text
        """
        try:
            bank = await self._fetch_bank(db, company_id, bank_id)

            conditions = [
                Question.question_bank_id == bank_id,
                Question.company_id == company_id,
                Question.is_active.is_(True),
            ]
            if question_type and question_type != "all":
                conditions.append(Question.question_type == question_type)
            if search:
                conditions.append(Question.question.ilike(f"%{search}%"))

            result = await db.execute(
                select(Question).where(*conditions).order_by(desc(Question.created_at))
            )
            questions = list(result.scalars().all())

        except HireLaneError:
            raise
        except Exception as e:
            logger.error("Database error fetching question bank %s: %s", bank_id, str(e))
            raise DatabaseError(
                message="Failed to fetch question bank",
                context={"bank_id": str(bank_id)},
            )

        return QuestionBankDetail(
            bank=_to_item(bank),
            questions=[_to_question(q) for q in questions],
        )

    async def create_bank(
        self,
        db: AsyncSession,
        company_id: str,
        user_id: str,
        payload: QuestionBankPayload,
    ) -> QuestionBankItem:
        now = datetime.now(timezone.utc)
        bank = QuestionBank(
            id=uuid.uuid4(),
            company_id=company_id,
            created_by=user_id,
            name=payload.name,
            description=payload.description or None,
            category=payload.category,
            sub_category=payload.sub_category or None,
            tags=payload.tags or None,
            is_active=True,
            is_public=payload.is_public,
            is_template=payload.is_template,
            usage_count=0,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(bank)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Database error creating question bank: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create question bank",
                context={"company_id": company_id},
            )

        logger.info("Question bank created: %s (company=%s)", bank.id, company_id)
        return _to_item(bank, question_count=0)

    async def update_bank(
        self,
        db: AsyncSession,
        company_id: str,
        bank_id: uuid.UUID,
        payload: QuestionBankPayload,
    ) -> QuestionBankItem:
        try:
            bank = await self._fetch_bank(db, company_id, bank_id)
            bank.name = payload.name
            bank.description = payload.description or None
            bank.category = payload.category
            bank.tags = payload.tags or None
            bank.is_public = payload.is_public
            bank.updated_at = datetime.now(timezone.utc)
            await db.commit()
        except HireLaneError:
            raise
        except Exception as e:
            await db.rollback()
            logger.error("Database error updating question bank %s: %s", bank_id, str(e))
            raise DatabaseError(
                message="Failed to update question bank",
                context={"bank_id": str(bank_id)},
            )
        return _to_item(bank)

    async def delete_bank(
        self,
        db: AsyncSession,
        company_id: str,
        bank_id: uuid.UUID,
    ) -> QuestionBankItem:
        """Soft delete: the bank is deactivated, its rows are kept."""
        try:
            bank = await self._fetch_bank(db, company_id, bank_id)
            bank.is_active = False
            bank.updated_at = datetime.now(timezone.utc)
            await db.commit()
        except HireLaneError:
            raise
        except Exception as e:
            await db.rollback()
            logger.error("Database error deleting question bank %s: %s", bank_id, str(e))
            raise DatabaseError(
                message="Failed to delete question bank",
                context={"bank_id": str(bank_id)},
            )
        logger.info("Question bank deactivated: %s (company=%s)", bank_id, company_id)
        return _to_item(bank)

    async def _fetch_bank(
        self,
        db: AsyncSession,
        company_id: str,
        bank_id: uuid.UUID,
    ) -> QuestionBank:
        result = await db.execute(
            select(QuestionBank).where(
                QuestionBank.id == bank_id,
                QuestionBank.company_id == company_id,
            )
        )
        bank = result.scalar_one_or_none()
        if bank is None:
            raise NotFoundError(
                resource="question_bank",
                resource_id=str(bank_id),
                message="Question bank not found",
            )
        return bank


question_bank_service = QuestionBankService()
