"""Read access to the admin-managed registration form schema."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from registration_gate.core.settings import settings
from registration_gate.models.form_schema import FormSchema
from registration_gate.schemas.form import FieldDescriptor

logger = logging.getLogger(__name__)


class FormSchemaProvider:
    """Expose the configured form fields and which ``formData`` keys they allow."""

    def __init__(self, session: Session, schema_identifier: str | None = None) -> None:
        self._session = session
        self._identifier = schema_identifier or settings.form_schema_identifier

    def get_schema(self) -> list[FieldDescriptor]:
        """Return the field descriptors, or an empty list when none are configured."""
        schema = self._session.scalars(
            select(FormSchema).where(FormSchema.schema_identifier == self._identifier)
        ).first()
        if schema is None or not schema.fields:
            return []
        descriptors: list[FieldDescriptor] = []
        for raw in schema.fields:
            try:
                descriptors.append(FieldDescriptor.model_validate(raw))
            except ValueError:
                logger.warning("Skipping malformed form field descriptor: %r", raw)
        return descriptors

    def allowed_field_names(self) -> set[str]:
        return {field.name for field in self.get_schema()}

    def filter_form_fields(self, form_fields: dict[str, Any]) -> dict[str, Any]:
        """Drop keys the schema does not declare.

        When no schema is configured every key is kept.
        """
        allowed = self.allowed_field_names()
        if not allowed:
            return dict(form_fields)
        unknown = set(form_fields) - allowed
        if unknown:
            logger.debug("Discarding undeclared form fields: %s", sorted(unknown))
        return {key: value for key, value in form_fields.items() if key in allowed}
