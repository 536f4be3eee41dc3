from __future__ import annotations


class RentrollError(Exception):
    """Base class for errors raised by the billing pipeline."""


class ValidationError(RentrollError, ValueError):
    """User input that must be corrected before the wizard can continue."""

    def __init__(self, message: str, invalid_rooms: list[str] | None = None) -> None:
        super().__init__(message)
        self.invalid_rooms = invalid_rooms or []


class TransientIOError(RentrollError):
    """A store operation failed in a way that may succeed on retry."""


class ConflictError(RentrollError):
    """The billing run was already confirmed, or a confirm is in flight."""
