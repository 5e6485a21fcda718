"""
HireLane API: Request Body Validators
=======================================

A validator is a plain callable `(body) -> ValidationResult`. The middleware
wrapper runs it on the parsed JSON body and rejects with 400 and the
validator's `error` text when `is_valid` is False.

`schema_validator()` turns a Pydantic model into a validator, so request
contracts stay declared in hirelane.schemas like every other API contract.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from pydantic import BaseModel, ValidationError


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None


Validator = Callable[[Any], ValidationResult]


def describe_error(error: dict) -> str:
    # Messages raised by our own validators are shown verbatim
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


def schema_validator(model: Type[BaseModel]) -> Validator:
    """Build a validator that accepts exactly the bodies `model` accepts."""

    def validate(body: Any) -> ValidationResult:
        try:
            model.model_validate(body)
        except ValidationError as exc:
            return ValidationResult(is_valid=False, error=describe_error(exc.errors()[0]))
        return ValidationResult(is_valid=True)

    validate.__name__ = f"validate_{model.__name__}"
    return validate
