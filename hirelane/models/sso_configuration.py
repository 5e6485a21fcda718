"""
HireLane API: SSO Configuration Model
=======================================

What:  ORM model for the `sso_configurations` table: one identity-provider
       configuration per (company, provider).
How:   Provider-specific settings live in the `configuration` JSONB column
       with the shape
           {"authUrl": ..., "clientId": ..., "redirectUri": ..., "scopes": [...]}
       and are parsed into hirelane.schemas.sso.OAuthProviderConfig on read.

Query Patterns:
    - Authorize: WHERE company_id = :tenant AND provider = :provider AND is_active
      → idx_sso_configurations_lookup; at most one active row per pair
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Boolean, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from hirelane.database import Base


class SSOConfiguration(Base):

    __tablename__ = "sso_configurations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    company_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Tenant that owns this identity-provider configuration",
    )

    # e.g. google, microsoft, okta
    provider: Mapped[str] = mapped_column(String(50), nullable=False)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    configuration: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        comment="authUrl, clientId, redirectUri, scopes",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_sso_configurations_lookup", "company_id", "provider", "is_active"),
    )

    def __repr__(self) -> str:
        return (
            f"<SSOConfiguration(company_id='{self.company_id}', provider='{self.provider}', "
            f"is_active={self.is_active})>"
        )
