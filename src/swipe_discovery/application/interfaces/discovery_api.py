"""
Discovery API Interface

Port interface for the remote recommendation service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.discovery.entities import (
        DiscoverBatch,
        DiscoverySettings,
        PreferenceVector,
        UserMusicProfile,
    )
    from ...domain.discovery.value_objects import TrackId


class DiscoveryAPI(ABC):
    """Abstract interface for the discovery service.

    Every method is an opaque, fallible async call. Implementations should
    raise ``NetworkFailure`` for transport or server errors and must not
    retry on their own.
    """

    @abstractmethod
    async def discover(self, preferences: PreferenceVector, count: int) -> DiscoverBatch:
        """Fetch up to *count* candidate tracks biased by *preferences*.

        The service does not guarantee uniqueness across calls.
        """
        ...

    @abstractmethod
    async def submit_feedback(self, track_id: TrackId, rating: float, label: str) -> None:
        """Record the user's rating for a track."""
        ...

    @abstractmethod
    async def update_preferences(self, settings: DiscoverySettings) -> None:
        """Push the remote-owned discovery settings."""
        ...

    @abstractmethod
    async def update_weights(self, preferences: PreferenceVector) -> None:
        """Push the full preference vector."""
        ...

    @abstractmethod
    async def get_settings(self) -> UserMusicProfile:
        """Load the stored profile used to rehydrate a session."""
        ...

    async def aclose(self) -> None:
        """Release any transport resources."""
        return None
