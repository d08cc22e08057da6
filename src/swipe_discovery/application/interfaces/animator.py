"""
Animator Interface

Port interface for timed card transitions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.discovery.entities import CardTransform


class Animator(ABC):
    """Runs a card transition to completion.

    The controller awaits ``animate`` and treats its return as the moment the
    transition resolved. Cancellation must propagate.
    """

    @abstractmethod
    async def animate(
        self, start: CardTransform, end: CardTransform, duration_ms: int
    ) -> None:
        ...
