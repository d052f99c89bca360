"""Validation error taxonomy.

Every error carries the offending field name and a human-readable reason. Errors are raised
synchronously and never recovered inside the validation core; the caller decides how to surface
them.
"""

from __future__ import annotations

from collections.abc import Iterable


class ValidationError(ValueError):
    """Base class for all query validation failures."""

    def __init__(self, field: str | None, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}" if field else reason)


class MissingField(ValidationError):
    """A required field is absent or empty."""


class InvalidUrl(ValidationError):
    """A value cannot be normalized into an absolute URL."""


class InvalidInteger(ValidationError):
    """A value is not a strict signed integer."""


class InvalidBoolean(ValidationError):
    """A value is not one of the recognized boolean tokens."""


class NotInSet(ValidationError):
    """A value is not one of the allowed values."""


class CrossFieldViolation(ValidationError):
    """An invariant spanning several fields does not hold."""

    def __init__(self, fields: Iterable[str], reason: str) -> None:
        self.fields = tuple(fields)
        super().__init__(",".join(self.fields) or None, reason)
