"""
Typed errors raised by the earnings core.

The request layer maps ``error_type`` to user-facing status codes; the core
only guarantees one stable error class per failure condition.
"""

from __future__ import annotations

from typing import Any


class EarningsError(Exception):
    """Base class for all earnings analytics errors."""

    error_type: str = "EARNINGS_ERROR"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_type, "message": self.message, **self.details}


class ValidationError(EarningsError, ValueError):
    """Malformed date, month out of range, bad goal type or amount, inverted range."""

    error_type = "VALIDATION_ERROR"


class FutureDateError(ValidationError):
    """A date or range upper bound lies after the reference "today"."""

    error_type = "FUTURE_DATE"


class NotFoundError(EarningsError, LookupError):
    """Goal is absent or not owned by the calling provider."""

    error_type = "NOT_FOUND"
