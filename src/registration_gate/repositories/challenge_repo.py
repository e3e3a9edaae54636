"""Data access helpers for OTP challenges."""
from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from registration_gate.core.settings import settings
from registration_gate.db.time import utcnow
from registration_gate.models.challenge import OtpChallenge, OtpChannel
from registration_gate.repositories.transaction import dialect_insert

__all__ = ["ChallengeRepository"]


class ChallengeRepository:
    """Time-expiring storage of per-identity-pair challenge state.

    Callers own the transaction: methods flush or execute statements but never
    commit.
    """

    def __init__(self, session: Session, ttl_seconds: int | None = None) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session
        self.ttl = timedelta(
            seconds=settings.otp_ttl_seconds if ttl_seconds is None else ttl_seconds
        )

    def get_live(
        self, email: str, mobile: str, *, now: datetime | None = None
    ) -> OtpChallenge | None:
        """Return the unexpired challenge for the pair, if any."""
        now = now or utcnow()
        stmt = (
            select(OtpChallenge)
            .where(
                OtpChallenge.email == email,
                OtpChallenge.mobile == mobile,
                OtpChallenge.expires_at > now,
            )
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).first()

    def record_code(
        self,
        email: str,
        mobile: str,
        channel: OtpChannel,
        code: str,
        *,
        now: datetime | None = None,
    ) -> OtpChallenge:
        """Store ``code`` for one channel, creating the challenge if needed.

        The other channel's code and flag are left as they are. Every write
        pushes the expiry out by the configured TTL.
        """
        now = now or utcnow()
        expires_at = now + self.ttl
        # An expired row must not lend its stale code for the other channel.
        self.purge_expired(now=now, email=email, mobile=mobile)

        insert = dialect_insert(self.session)
        if insert is not None:
            stmt = insert(OtpChallenge).values(
                email=email,
                mobile=mobile,
                created_at=now,
                expires_at=expires_at,
                **{channel.code_column: code, channel.sent_column: True},
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[OtpChallenge.email, OtpChallenge.mobile],
                set_={
                    channel.code_column: code,
                    channel.sent_column: True,
                    "expires_at": expires_at,
                },
            )
            self.session.execute(stmt)
        else:
            self._record_code_portable(email, mobile, channel, code, now, expires_at)

        challenge = self.get_live(email, mobile, now=now)
        if challenge is None:  # pragma: no cover - the row was written above
            raise RuntimeError("challenge vanished after upsert")
        return challenge

    def _record_code_portable(
        self,
        email: str,
        mobile: str,
        channel: OtpChannel,
        code: str,
        now: datetime,
        expires_at: datetime,
    ) -> None:
        challenge = self.session.scalars(
            select(OtpChallenge)
            .where(OtpChallenge.email == email, OtpChallenge.mobile == mobile)
            .with_for_update()
        ).first()
        if challenge is None:
            challenge = OtpChallenge(email=email, mobile=mobile, created_at=now)
            self.session.add(challenge)
        setattr(challenge, channel.code_column, code)
        setattr(challenge, channel.sent_column, True)
        challenge.expires_at = expires_at
        self.session.flush()

    def consume(self, challenge_id: int) -> bool:
        """Delete a challenge and report whether this call was the one that removed it."""
        result = self.session.execute(
            delete(OtpChallenge)
            .where(OtpChallenge.id == challenge_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def purge_expired(
        self,
        *,
        now: datetime | None = None,
        email: str | None = None,
        mobile: str | None = None,
    ) -> int:
        """Delete expired challenges, optionally restricted to a single pair."""
        now = now or utcnow()
        stmt = delete(OtpChallenge).where(OtpChallenge.expires_at <= now)
        if email is not None and mobile is not None:
            stmt = stmt.where(OtpChallenge.email == email, OtpChallenge.mobile == mobile)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount or 0
