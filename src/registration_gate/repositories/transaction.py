"""Shared transaction helpers for repositories."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from registration_gate.core.errors import PersistenceError

logger = logging.getLogger(__name__)

__all__ = ["dialect_insert", "persistence_guard"]


@contextmanager
def persistence_guard(session: Session, action: str) -> Iterator[None]:
    """Roll back and raise :class:`PersistenceError` if the wrapped block fails in the store."""
    try:
        yield
    except SQLAlchemyError as err:
        session.rollback()
        logger.exception("Storage failure while %s", action)
        raise PersistenceError() from err


_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(session: Session) -> Callable[..., Any] | None:
    """Return an ``INSERT … ON CONFLICT`` capable constructor for the bound dialect."""
    return _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
