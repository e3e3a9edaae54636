# src/registration_gate/models/form_schema.py
"""Admin-defined registration form layout."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from registration_gate.db.session import Base


class FormSchema(Base):
    """Ordered list of field descriptors rendered by the registration UI."""

    __tablename__ = "form_schema"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    schema_identifier: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, default="main"
    )
    fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
