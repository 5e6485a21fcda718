"""
HireLane API: Shared Response Schemas
=======================================

What:  Response models documented in OpenAPI for error and health payloads.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error envelope (see hirelane.api.responses).

    Example:
        {
            "success": false,
            "error": "Rate limit exceeded",
            "requestId": "550e8400-e29b-41d4-a716-446655440000",
            "retryAfter": 12
        }
    """

    success: bool = Field(default=False)
    error: str = Field(description="Human-readable error description")
    requestId: Optional[str] = Field(default=None, description="Request correlation ID")
    retryAfter: Optional[int] = Field(default=None, description="Seconds until retry (429 only)")
    details: Optional[str] = Field(default=None, description="Diagnostics (non-production only)")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    environment: str = Field(description="Runtime mode")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
