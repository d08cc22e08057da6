"""
Haptics Interface

Port interface for tactile feedback on commit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class HapticEngine(ABC):
    @abstractmethod
    def pulse(self, intensity: float) -> None:
        """Fire a single pulse at a fixed *intensity* in [0, 1]."""
        ...


class NullHaptics(HapticEngine):
    """Haptics for surfaces without a vibration motor."""

    def pulse(self, intensity: float) -> None:
        return None
