"""
HireLane API: Question Bank Routes
====================================

What:  Company-scoped question bank management for the dashboard.

    GET    /api/content/question-banks              list active banks
    POST   /api/content/question-banks              create a bank
    GET    /api/content/question-banks/{bank_id}    bank + questions
    PUT    /api/content/question-banks/{bank_id}    update a bank
    DELETE /api/content/question-banks/{bank_id}    soft delete

How:   Every handler runs behind the request middleware wrapper with
       require_auth; the company comes from the session's tenant_id, never
       from the request. Writes are validated against QuestionBankPayload
       and creation is rate limited per client.

Response shape:
    {"success": true, "data": ...}
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hirelane.api import APIRequest, RateLimitRule, api_middleware, schema_validator
from hirelane.database import get_db_session
from hirelane.exceptions import InvalidInputError, NotFoundError
from hirelane.schemas.common import ErrorResponse
from hirelane.schemas.question_bank import QuestionBankDetail, QuestionBankPayload
from hirelane.services.question_bank_service import question_bank_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/content", tags=["Question Banks"])

validate_question_bank = schema_validator(QuestionBankPayload)

ERROR_RESPONSES = {
    401: {"description": "No session", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}

SEARCH_MAX_LENGTH = 200


def _ok(data: Any, status_code: int = 200, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data), **extra},
    )


def _parse_bank_id(value: str) -> uuid.UUID:
    # Typed after the gates; an unparseable id cannot name an existing bank
    try:
        return uuid.UUID(value)
    except ValueError:
        raise NotFoundError(
            resource="question_bank",
            resource_id=value,
            message="Question bank not found",
        )


def _require_company(ctx: APIRequest) -> str:
    if not ctx.session.tenant_id:
        raise InvalidInputError("Company ID not found")
    return ctx.session.tenant_id


@router.get("/question-banks", responses=ERROR_RESPONSES, summary="List question banks")
@api_middleware(require_auth=True, log_requests=True)
async def list_question_banks(
    ctx: APIRequest,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    company_id = ctx.session.tenant_id
    if not company_id:
        return _ok([])
    banks = await question_bank_service.list_banks(db, company_id)
    return _ok(banks)


@router.post(
    "/question-banks",
    status_code=201,
    responses={
        **ERROR_RESPONSES,
        400: {"description": "Invalid body", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Create a question bank",
)
@api_middleware(
    require_auth=True,
    rate_limit=RateLimitRule(requests=30, window_ms=60_000),
    validate_input=validate_question_bank,
    log_requests=True,
)
async def create_question_bank(
    ctx: APIRequest,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    session = ctx.session
    if not session.tenant_id or not session.user_id:
        raise InvalidInputError("Required fields missing")

    payload = QuestionBankPayload.model_validate(ctx.body)
    bank = await question_bank_service.create_bank(
        db,
        company_id=session.tenant_id,
        user_id=session.user_id,
        payload=payload,
    )
    return _ok(bank, status_code=201)


@router.get(
    "/question-banks/{bank_id}",
    responses={**ERROR_RESPONSES, 404: {"description": "Not found", "model": ErrorResponse}},
    summary="Get a question bank with its questions",
)
@api_middleware(require_auth=True, log_requests=True)
async def get_question_bank(
    ctx: APIRequest,
    bank_id: str,
    question_type: Optional[str] = Query(default=None, alias="questionType"),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    bank_uuid = _parse_bank_id(bank_id)
    if search and len(search) > SEARCH_MAX_LENGTH:
        raise InvalidInputError(
            f"Search term must be at most {SEARCH_MAX_LENGTH} characters", field="search"
        )
    company_id = ctx.session.tenant_id
    if not company_id:
        return _ok(QuestionBankDetail())
    detail = await question_bank_service.get_bank(
        db,
        company_id=company_id,
        bank_id=bank_uuid,
        question_type=question_type,
        search=search,
    )
    return _ok(detail)


@router.put(
    "/question-banks/{bank_id}",
    responses={
        **ERROR_RESPONSES,
        400: {"description": "Invalid body", "model": ErrorResponse},
        404: {"description": "Not found", "model": ErrorResponse},
    },
    summary="Update a question bank",
)
@api_middleware(require_auth=True, validate_input=validate_question_bank, log_requests=True)
async def update_question_bank(
    ctx: APIRequest,
    bank_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    bank_uuid = _parse_bank_id(bank_id)
    company_id = _require_company(ctx)
    payload = QuestionBankPayload.model_validate(ctx.body)
    bank = await question_bank_service.update_bank(
        db, company_id=company_id, bank_id=bank_uuid, payload=payload
    )
    return _ok(bank)


@router.delete(
    "/question-banks/{bank_id}",
    responses={**ERROR_RESPONSES, 404: {"description": "Not found", "model": ErrorResponse}},
    summary="Delete (deactivate) a question bank",
)
@api_middleware(require_auth=True, log_requests=True)
async def delete_question_bank(
    ctx: APIRequest,
    bank_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    bank_uuid = _parse_bank_id(bank_id)
    company_id = _require_company(ctx)
    bank = await question_bank_service.delete_bank(db, company_id=company_id, bank_id=bank_uuid)
    return _ok(bank, message="Question bank deleted successfully")
