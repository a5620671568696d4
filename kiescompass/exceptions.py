"""Domain exceptions raised by services and translated by the API layer.

Services raise these without knowing about HTTP; :mod:`kiescompass.main`
registers a handler per class that renders the shared ``ErrorResponse``
payload. Infrastructure failures (SQLAlchemy errors) are intentionally absent
here: they propagate untouched and have their own handlers.
"""

from __future__ import annotations

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "KiesCompassError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]


class KiesCompassError(Exception):
    """Base class for errors that carry a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(KiesCompassError, LookupError):
    """A referenced user or catalog entry does not exist."""

    def __init__(self, entity: str, identifier: str | None = None) -> None:
        if identifier is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} with ID {identifier} not found"
        super().__init__(message)
        self.entity = entity
        self.identifier = identifier


class UnauthorizedError(KiesCompassError, PermissionError):
    """Caller identity is missing, invalid, or credentials do not match."""


class ForbiddenError(KiesCompassError, PermissionError):
    """Caller is authenticated but lacks the required role."""


class ConflictError(KiesCompassError, ValueError):
    """A uniqueness rule (username, email) would be violated."""


class ValidationError(KiesCompassError, ValueError):
    """Input rejected at the service boundary."""

    def __init__(self, message: str, *, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
