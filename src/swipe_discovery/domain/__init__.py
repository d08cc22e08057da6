# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, exceptions and domain events
- discovery/: Tracks, preference vectors, gestures and the card state machine
"""

from swipe_discovery.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
