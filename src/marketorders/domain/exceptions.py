"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from datetime import date


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A required field is missing or an input is invalid."""


class EligibilityError(ValidationError):
    """The requested date is not available for the chosen delivery method.

    ``suggested_date`` is the next available date, or None when nothing was
    found within the search horizon.
    """

    def __init__(self, reason: str, suggested_date: date | None = None) -> None:
        self.reason = reason
        self.suggested_date = suggested_date
        message = reason
        if suggested_date is not None:
            message = f"{reason}. Next available date: {suggested_date.isoformat()}"
        super().__init__(message)


class GuardViolationError(DomainException):
    """The actor is not allowed to perform this action in the current state."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DependencyError(DomainException):
    """The persistence layer failed; nothing was modified."""
