"""
HireLane API: Route Handler Toolkit
=====================================

What:  The per-route request middleware wrapper and its companions:
       - wrapper.py:     with_api_middleware / api_middleware, APIRequest
       - validators.py:  ValidationResult, schema_validator
       - responses.py:   the JSON error envelope shared with main.py
"""

from hirelane.api.validators import ValidationResult, schema_validator
from hirelane.api.wrapper import (
    APIMiddlewareOptions,
    APIRequest,
    RateLimitRule,
    api_middleware,
    with_api_middleware,
)

__all__ = [
    "APIMiddlewareOptions",
    "APIRequest",
    "RateLimitRule",
    "ValidationResult",
    "api_middleware",
    "schema_validator",
    "with_api_middleware",
]
