"""Create sso_configurations, question_banks and questions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "sso_configurations",
        _id_column(),
        sa.Column(
            "company_id",
            sa.String(64),
            nullable=False,
            comment="Tenant that owns this identity-provider configuration",
        ),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "configuration",
            postgresql.JSONB(),
            nullable=False,
            comment="authUrl, clientId, redirectUri, scopes",
        ),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_sso_configurations_lookup",
        "sso_configurations",
        ["company_id", "provider", "is_active"],
    )

    op.create_table(
        "question_banks",
        _id_column(),
        sa.Column("company_id", sa.String(64), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("sub_category", sa.String(100), nullable=True),
        sa.Column("tags", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("is_public", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("is_template", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("usage_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("last_used_at", sa.TIMESTAMP(timezone=True), nullable=True),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_question_banks_company_active",
        "question_banks",
        ["company_id", "is_active"],
    )

    op.create_table(
        "questions",
        _id_column(),
        sa.Column(
            "question_bank_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("question_banks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company_id", sa.String(64), nullable=False),
        sa.Column("question_type", sa.String(50), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_questions_bank", "questions", ["question_bank_id", "is_active"])


def downgrade() -> None:
    op.drop_index("idx_questions_bank", table_name="questions")
    op.drop_table("questions")
    op.drop_index("idx_question_banks_company_active", table_name="question_banks")
    op.drop_table("question_banks")
    op.drop_index("idx_sso_configurations_lookup", table_name="sso_configurations")
    op.drop_table("sso_configurations")
