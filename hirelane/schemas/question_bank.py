"""
HireLane API: Question Bank Schemas
=====================================

What:  API contracts for the question bank endpoints.
How:   Field names are snake_case in Python and camelCase on the wire
       (alias generator), matching the JSON the dashboard already sends.

    QuestionBankPayload  ← request body of POST and PUT (also the validator)
    QuestionBankItem     → one row of GET /api/content/question-banks
    QuestionItem         → one question inside a bank
    QuestionBankDetail   → GET /api/content/question-banks/{id}
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class QuestionBankPayload(_CamelModel):
    name: str = Field(max_length=255)
    category: str = Field(max_length=100)
    sub_category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: bool = False
    is_template: bool = False

    @model_validator(mode="before")
    @classmethod
    def require_name_and_category(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not data.get("name") or not data.get("category"):
            raise ValueError("Name and category are required")
        return data


class QuestionBankItem(_CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    category: str
    sub_category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_active: bool
    is_public: bool
    is_template: bool
    # Only computed by the listing query
    question_count: Optional[int] = None
    usage_count: int = 0
    last_used_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class QuestionItem(_CamelModel):
    id: uuid.UUID
    question_bank_id: uuid.UUID
    question_type: str
    question: str
    created_at: datetime


class QuestionBankDetail(_CamelModel):
    bank: Optional[QuestionBankItem] = None
    questions: List[QuestionItem] = Field(default_factory=list)
