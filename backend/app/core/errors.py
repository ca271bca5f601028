from __future__ import annotations

from app.services.validation import FieldError


class NotFoundError(LookupError):
    """Raised when a record is missing or belongs to another user."""


class ImportStateError(RuntimeError):
    """Raised when an import job is not in a state that allows the operation."""


class UserValidationError(ValueError):
    """Raised when a user record fails field validation before persistence."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"Invalid user fields: {fields}")
