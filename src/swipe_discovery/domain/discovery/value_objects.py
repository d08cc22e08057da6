"""Immutable value objects for the discovery bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

from swipe_discovery.domain.shared.messages import ErrorMessages

FEATURE_NAMES: tuple[str, ...] = (
    "danceability",
    "energy",
    "valence",
    "tempo",
    "acousticness",
    "instrumentalness",
    "speechiness",
    "loudness",
)


@dataclass(frozen=True)
class TrackId:
    """Opaque identifier assigned by the discovery service (usually a Spotify ID)."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)


# Serializes as plain string in JSON, stores as TrackId in the model.
TrackIdField = Annotated[
    TrackId,
    PlainValidator(lambda v: TrackId(v) if isinstance(v, str) else v),
    PlainSerializer(lambda v: v.value, return_type=str),
]


class SwipeDirection(Enum):
    """Classified outcome of a released gesture."""

    NONE = "none"
    LEFT = "left"
    RIGHT = "right"

    @property
    def committed(self) -> bool:
        return self is not SwipeDirection.NONE

    @property
    def rating(self) -> float:
        """Scalar rating sent to the recommendation service.

        The scale is asymmetric on purpose: the service calibrates against
        0.8 / 0.2, not 1.0 / 0.0.
        """
        if self is SwipeDirection.RIGHT:
            return 0.8
        if self is SwipeDirection.LEFT:
            return 0.2
        raise ValueError("An uncommitted gesture has no rating")

    @property
    def label(self) -> str:
        if self is SwipeDirection.RIGHT:
            return "loved_it"
        if self is SwipeDirection.LEFT:
            return "disliked_it"
        raise ValueError("An uncommitted gesture has no label")

    @property
    def sign(self) -> int:
        return {SwipeDirection.LEFT: -1, SwipeDirection.RIGHT: 1}.get(self, 0)

    @classmethod
    def from_dx(cls, dx: float) -> SwipeDirection:
        if dx > 0:
            return cls.RIGHT
        if dx < 0:
            return cls.LEFT
        return cls.NONE


class GesturePhase(Enum):
    """Per-card interaction state with enforced transitions.

    State transitions:
    - IDLE -> DRAGGING (pointer down)
    - IDLE -> COMMITTING (programmatic commit, e.g. a button)
    - DRAGGING -> COMMITTING (release past threshold)
    - DRAGGING -> RESETTING (release below threshold)
    - DRAGGING -> IDLE (drag cancelled without movement)
    - COMMITTING -> RESETTING (exit animation finished)
    - RESETTING -> IDLE (next card settled)
    """

    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    RESETTING = "resetting"

    def can_transition_to(self, target: GesturePhase) -> bool:
        valid_transitions = {
            GesturePhase.IDLE: {GesturePhase.DRAGGING, GesturePhase.COMMITTING},
            GesturePhase.DRAGGING: {
                GesturePhase.COMMITTING,
                GesturePhase.RESETTING,
                GesturePhase.IDLE,
            },
            GesturePhase.COMMITTING: {GesturePhase.RESETTING},
            GesturePhase.RESETTING: {GesturePhase.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_interactive(self) -> bool:
        """Cards accept new gestures only outside a transition."""
        return self in {GesturePhase.IDLE, GesturePhase.DRAGGING}


class QueuePhase(Enum):
    """Fill level of the look-ahead buffer.

    Refilling is tracked separately because it overlaps READY and DRAINING:
    the card keeps being consumed while a refill is in flight.
    """

    FILLING = "filling"  # initial load, capacity not yet reached
    READY = "ready"  # above the low-water mark
    DRAINING = "draining"  # at or below the low-water mark
