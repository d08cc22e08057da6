"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class NetworkFailure(DomainError):
    """A remote call failed. Transient and never fatal to the interaction loop."""

    def __init__(
        self, operation: str, message: str | None = None, status: int | None = None
    ) -> None:
        msg = message or f"Remote call '{operation}' failed"
        super().__init__(msg, code="NETWORK_FAILURE")
        self.operation = operation
        self.status = status


class EmptyResult(DomainError):
    """The discovery service returned no tracks.

    Surfaced to the user as an empty-queue state rather than an error.
    """

    def __init__(self, requested: int, message: str | None = None) -> None:
        msg = message or f"Discovery returned no tracks (requested {requested})"
        super().__init__(msg, code="EMPTY_RESULT")
        self.requested = requested


class InvalidGestureError(DomainError):
    """A pointer sample could not be interpreted (e.g. NaN translation)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="INVALID_GESTURE")
        self.field = field
