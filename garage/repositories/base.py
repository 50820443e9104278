"""
Shared helpers for the repositories.
"""
from typing import Any

from garage.database import Database
from garage.errors import ValidationError

LIKE_ESCAPE = "!"


def is_blank(value: Any) -> bool:
    """True for a missing value or a string holding only whitespace."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def like_pattern(query: str) -> str:
    """Lower-cased ``%query%`` with LIKE wildcards in ``query`` escaped.

    Use with ``LIKE :pattern ESCAPE '!'`` against ``LOWER(column)``.
    """
    escaped = (
        query.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def to_int(value: Any, message: str) -> int:
    """Coerce ``value`` to int, rejecting bools, fractions and junk."""
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(message)
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message) from None


class BaseRepository:
    """Holds the gateway every repository talks to."""

    def __init__(self, db: Database):
        self.db = db
