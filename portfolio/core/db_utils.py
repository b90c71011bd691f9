from __future__ import annotations

import uuid
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError

# Serialization failure and deadlock, as reported by PostgreSQL.
_RETRYABLE_SQLSTATES = {"40001", "40P01"}
_RETRYABLE_MESSAGES = ("database is locked", "could not serialize access", "deadlock detected")


def normalize_uuid_list(values: Iterable[uuid.UUID | str] | None) -> List[uuid.UUID]:
    """Normalize UUID-like values to UUIDs for DB IN clauses."""
    if not values:
        return []
    normalized: List[uuid.UUID] = []
    for value in values:
        if isinstance(value, uuid.UUID):
            normalized.append(value)
        else:
            normalized.append(uuid.UUID(str(value)))
    return normalized


def is_serialization_failure(exc: SQLAlchemyError) -> bool:
    """True when the driver reports a transaction conflict worth retrying."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate in _RETRYABLE_SQLSTATES:
        return True
    text = str(orig if orig is not None else exc).lower()
    return any(marker in text for marker in _RETRYABLE_MESSAGES)
