"""Data access helpers for registration records."""
from __future__ import annotations

import secrets
import time
from datetime import datetime
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from registration_gate.core.settings import settings
from registration_gate.db.time import utcnow
from registration_gate.models.registration import Registration
from registration_gate.repositories.transaction import dialect_insert

__all__ = ["RegistrationRepository", "new_registration_id"]


def new_registration_id(prefix: str | None = None) -> str:
    """Return a unique identifier such as ``AHV-1760000000000-9f2c1a7b``."""
    prefix = settings.registration_id_prefix if prefix is None else prefix
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class RegistrationRepository:
    """Thin wrapper around database access for registration records."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_identity(self, email: str, mobile: str) -> Registration | None:
        """Return the record owned by a verified (email, mobile) pair."""
        stmt = (
            select(Registration)
            .where(Registration.email == email, Registration.mobile == mobile)
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).first()

    def get_by_registration_id(self, registration_id: str) -> Registration | None:
        return self.session.scalars(
            select(Registration).where(Registration.registration_id == registration_id)
        ).first()

    def exists_finalized(self, email: str | None = None, mobile: str | None = None) -> bool:
        """Return True if a submitted, active record uses the email or the mobile.

        Drafts and inactive records do not count.
        """
        clauses = []
        if email:
            clauses.append(Registration.email == email)
        if mobile:
            clauses.append(Registration.mobile == mobile)
        if not clauses:
            return False
        stmt = (
            select(Registration.id)
            .where(
                or_(*clauses),
                Registration.is_draft.is_(False),
                Registration.is_inactive.is_(False),
            )
            .limit(1)
        )
        return self.session.scalars(stmt).first() is not None

    def upsert(
        self,
        email: str,
        mobile: str,
        values: dict[str, Any],
        *,
        is_draft: bool,
        now: datetime | None = None,
    ) -> Registration:
        """Write the full field set for a pair in one statement and return the row.

        ``registration_id`` and ``created_at`` are assigned on insert only. A
        draft write never touches a record that is already final; callers
        detect that case from the returned row's ``is_draft``.
        """
        now = now or utcnow()
        update_values = {
            **values,
            "is_draft": is_draft,
            "otp_verified_email": True,
            "otp_verified_phone": True,
            "updated_at": now,
        }

        insert = dialect_insert(self.session)
        if insert is not None:
            stmt = insert(Registration).values(
                email=email,
                mobile=mobile,
                registration_id=new_registration_id(),
                created_at=now,
                **update_values,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[Registration.email, Registration.mobile],
                set_=update_values,
                where=Registration.is_draft.is_(True) if is_draft else None,
            )
            self.session.execute(stmt)
        else:
            self._upsert_portable(email, mobile, update_values, is_draft, now)

        record = self.get_by_identity(email, mobile)
        if record is None:  # pragma: no cover - the row was written above
            raise RuntimeError("registration vanished after upsert")
        return record

    def _upsert_portable(
        self,
        email: str,
        mobile: str,
        update_values: dict[str, Any],
        is_draft: bool,
        now: datetime,
    ) -> None:
        record = self.session.scalars(
            select(Registration)
            .where(Registration.email == email, Registration.mobile == mobile)
            .with_for_update()
        ).first()
        if record is None:
            record = Registration(
                email=email,
                mobile=mobile,
                registration_id=new_registration_id(),
                created_at=now,
            )
            self.session.add(record)
        elif is_draft and not record.is_draft:
            return
        for key, value in update_values.items():
            setattr(record, key, value)
        self.session.flush()
