"""Draft and final registration persistence under a verified identity."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from registration_gate.core.errors import AlreadyRegisteredError
from registration_gate.models.registration import Registration
from registration_gate.repositories.registration_repo import RegistrationRepository
from registration_gate.repositories.transaction import persistence_guard
from registration_gate.services.schema_provider import FormSchemaProvider
from registration_gate.services.session_tokens import RegistrationIdentity

logger = logging.getLogger(__name__)

_STATIC_FIELDS = ("full_name", "gender", "date_of_birth")


class DraftManager:
    """Upsert partial or final registration content keyed by (email, mobile)."""

    def __init__(
        self,
        session: Session,
        *,
        registrations: RegistrationRepository | None = None,
        schema: FormSchemaProvider | None = None,
    ) -> None:
        self._session = session
        self._registrations = registrations or RegistrationRepository(session)
        self._schema = schema or FormSchemaProvider(session)

    def _values(
        self, form_fields: dict[str, Any], static_fields: dict[str, Any]
    ) -> dict[str, Any]:
        values = {key: static_fields.get(key) for key in _STATIC_FIELDS}
        with persistence_guard(self._session, "loading form schema"):
            values["form_data"] = self._schema.filter_form_fields(form_fields)
        return values

    def _write(
        self,
        identity: RegistrationIdentity,
        form_fields: dict[str, Any],
        static_fields: dict[str, Any],
        *,
        is_draft: bool,
    ) -> Registration:
        values = self._values(form_fields, static_fields)
        with persistence_guard(self._session, "saving registration"):
            record = self._registrations.upsert(
                identity.email, identity.mobile, values, is_draft=is_draft
            )
            if is_draft and not record.is_draft:
                self._session.rollback()
                raise AlreadyRegisteredError()
            self._session.commit()
        return record

    def save_draft(
        self,
        identity: RegistrationIdentity,
        form_fields: dict[str, Any],
        static_fields: dict[str, Any],
    ) -> Registration:
        """Store partial content; the registration id stays stable across saves.

        Raises:
            AlreadyRegisteredError: The identity already submitted a final registration.
            PersistenceError: The store failed; nothing was written.
        """
        record = self._write(identity, form_fields, static_fields, is_draft=True)
        logger.info("Saved draft %s", record.registration_id)
        return record

    def get_draft(self, identity: RegistrationIdentity) -> Registration | None:
        """Return the identity's record only while it is still a draft."""
        with persistence_guard(self._session, "loading draft"):
            record = self._registrations.get_by_identity(identity.email, identity.mobile)
        if record is None or not record.is_draft:
            return None
        return record

    def submit_final(
        self,
        identity: RegistrationIdentity,
        form_fields: dict[str, Any],
        static_fields: dict[str, Any],
    ) -> Registration:
        """Store the final content and mark the record as no longer a draft."""
        record = self._write(identity, form_fields, static_fields, is_draft=False)
        logger.info("Registration %s submitted", record.registration_id)
        return record
