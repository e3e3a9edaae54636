# src/registration_gate/models/challenge.py
"""In-flight dual-channel verification state."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from registration_gate.db.session import Base
from registration_gate.db.time import utcnow


class OtpChallenge(Base):
    """One-time codes issued for an (email, mobile) identity pair.

    A code column is populated iff its matching ``*_sent`` flag is true. Rows
    past ``expires_at`` are treated as absent and purged by the repository.
    """

    __tablename__ = "otp_challenge"
    __table_args__ = (UniqueConstraint("email", "mobile", name="uq_otp_challenge_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    mobile: Mapped[str] = mapped_column(String(32), nullable=False)
    email_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    mobile_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    mobile_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    @property
    def is_complete(self) -> bool:
        """Return True once codes were sent on both channels."""
        return bool(self.email_sent and self.mobile_sent)


class OtpChannel(str, Enum):
    """Contact channel a one-time code is delivered over."""

    EMAIL = "email"
    MOBILE = "mobile"

    @property
    def code_column(self) -> str:
        return f"{self.value}_code"

    @property
    def sent_column(self) -> str:
        return f"{self.value}_sent"
