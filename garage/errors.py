"""
Error taxonomy shared by the repositories and the HTTP layer.

Repositories raise these; ``garage.main`` owns the single handler that
turns them into ``{"error": ..., **extra}`` responses.
"""
from fastapi import status


class GarageError(Exception):
    """Base class for every outcome other than success."""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"error": self.message, **self.extra}


class ValidationError(GarageError):
    """A required field is missing or malformed."""

    kind = "validation"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(GarageError):
    """An id, or a reference to a parent entity, does not resolve."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(GarageError):
    """Uniqueness violation, or a delete blocked by dependents."""

    kind = "conflict"
    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(GarageError):
    """Unexpected store failure. The caller only sees a generic message."""

    kind = "internal"

    def __init__(self, message: str = "Internal server error", **extra):
        extra.setdefault("message", "Unexpected database error")
        super().__init__(message, **extra)
