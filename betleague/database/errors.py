"""Classification of retryable datastore failures."""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})

_SQLITE_BUSY_MARKERS = ("database is locked", "database is busy", "database table is locked")


def _sqlstate(orig: BaseException | None) -> str | None:
    while orig is not None:
        for attr in ("sqlstate", "pgcode"):
            code = getattr(orig, attr, None)
            if isinstance(code, str) and code:
                return code
        orig = orig.__cause__
    return None


def is_serialization_failure(exc: BaseException) -> bool:
    """True when ``exc`` is a conflict that a fresh attempt can resolve."""
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return False
    code = _sqlstate(exc.orig)
    if code in RETRYABLE_SQLSTATES:
        return True
    message = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    return any(marker in message for marker in _SQLITE_BUSY_MARKERS)


__all__ = ["RETRYABLE_SQLSTATES", "is_serialization_failure"]
