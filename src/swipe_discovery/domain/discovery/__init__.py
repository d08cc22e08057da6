"""
Discovery Bounded Context

Tracks, preference vectors, gesture interpretation and the card state machine.
"""

from swipe_discovery.domain.discovery.entities import (
    AudioFeatures,
    CardState,
    CardTransform,
    DiscoverBatch,
    DiscoverySettings,
    GestureReading,
    GestureSample,
    PreferenceVector,
    Track,
    UserMusicProfile,
)
from swipe_discovery.domain.discovery.gesture import GestureInterpreter
from swipe_discovery.domain.discovery.value_objects import (
    FEATURE_NAMES,
    GesturePhase,
    QueuePhase,
    SwipeDirection,
    TrackId,
)

__all__ = [
    "FEATURE_NAMES",
    "AudioFeatures",
    "CardState",
    "CardTransform",
    "DiscoverBatch",
    "DiscoverySettings",
    "GestureInterpreter",
    "GesturePhase",
    "GestureReading",
    "GestureSample",
    "PreferenceVector",
    "QueuePhase",
    "SwipeDirection",
    "Track",
    "TrackId",
    "UserMusicProfile",
]
