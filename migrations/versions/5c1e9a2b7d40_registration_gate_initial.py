"""registration gate initial

Revision ID: 5c1e9a2b7d40
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create challenge, registration and form schema tables."""
    op.create_table(
        "otp_challenge",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("mobile", sa.String(length=32), nullable=False),
        sa.Column("email_code", sa.String(length=16), nullable=True),
        sa.Column("mobile_code", sa.String(length=16), nullable=True),
        sa.Column("email_sent", sa.Boolean(), nullable=False),
        sa.Column("mobile_sent", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", "mobile", name="uq_otp_challenge_pair"),
    )
    op.create_index(
        op.f("ix_otp_challenge_expires_at"), "otp_challenge", ["expires_at"], unique=False
    )

    op.create_table(
        "registration",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("registration_id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("mobile", sa.String(length=32), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("date_of_birth", sa.String(length=32), nullable=True),
        sa.Column("form_data", sa.JSON(), nullable=False),
        sa.Column("is_draft", sa.Boolean(), nullable=False),
        sa.Column("is_inactive", sa.Boolean(), nullable=False),
        sa.Column("otp_verified_email", sa.Boolean(), nullable=False),
        sa.Column("otp_verified_phone", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("registration_id"),
        sa.UniqueConstraint("email", "mobile", name="uq_registration_identity"),
    )
    op.create_index(op.f("ix_registration_email"), "registration", ["email"], unique=False)
    op.create_index(op.f("ix_registration_mobile"), "registration", ["mobile"], unique=False)

    op.create_table(
        "form_schema",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("schema_identifier", sa.String(length=64), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("schema_identifier"),
    )


def downgrade() -> None:
    """Drop the registration gate tables."""
    op.drop_table("form_schema")
    op.drop_index(op.f("ix_registration_mobile"), table_name="registration")
    op.drop_index(op.f("ix_registration_email"), table_name="registration")
    op.drop_table("registration")
    op.drop_index(op.f("ix_otp_challenge_expires_at"), table_name="otp_challenge")
    op.drop_table("otp_challenge")
