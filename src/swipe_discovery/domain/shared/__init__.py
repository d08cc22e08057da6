"""
Shared Domain Kernel

Contains types and exceptions shared across the discovery context.
"""

from swipe_discovery.domain.shared.exceptions import (
    DomainError,
    EmptyResult,
    InvalidGestureError,
    InvalidOperationError,
    NetworkFailure,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "InvalidOperationError",
    "NetworkFailure",
    "EmptyResult",
    "InvalidGestureError",
]
