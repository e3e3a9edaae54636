# src/registration_gate/models/registration.py
"""Persisted outcome of the registration flow."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from registration_gate.db.session import Base
from registration_gate.db.time import utcnow


class Registration(Base):
    """Draft or final registration keyed by a verified (email, mobile) pair."""

    __tablename__ = "registration"
    __table_args__ = (UniqueConstraint("email", "mobile", name="uq_registration_identity"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    registration_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    mobile: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    date_of_birth: Mapped[str | None] = mapped_column(String(32), nullable=True)
    form_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    is_draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Set by admin tooling; inactive records never block a new verification.
    is_inactive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    otp_verified_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    otp_verified_phone: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
