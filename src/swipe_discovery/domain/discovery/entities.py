"""Core domain models for the discovery bounded context."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from swipe_discovery.domain.discovery.value_objects import (
    FEATURE_NAMES,
    GesturePhase,
    SwipeDirection,
    TrackIdField,
)
from swipe_discovery.domain.shared.exceptions import ValidationError
from swipe_discovery.domain.shared.messages import ErrorMessages
from swipe_discovery.domain.shared.types import (
    FiniteFloat,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    PositiveFloat,
    TrackTitleStr,
    UnitInterval,
)


def clamp_unit(value: float) -> float:
    """Clamp a finite float into [0.0, 1.0]."""
    return min(1.0, max(0.0, value))


class AudioFeatures(BaseModel):
    """Subset of audio features the service chose to disclose for a track."""

    model_config = ConfigDict(frozen=True)

    danceability: FiniteFloat | None = None
    energy: FiniteFloat | None = None
    valence: FiniteFloat | None = None
    tempo: FiniteFloat | None = None
    acousticness: FiniteFloat | None = None
    instrumentalness: FiniteFloat | None = None
    speechiness: FiniteFloat | None = None
    loudness: FiniteFloat | None = None

    def present(self) -> dict[str, float]:
        """Return only the features that were disclosed."""
        return {name: value for name, value in self.model_dump().items() if value is not None}


class Track(BaseModel):
    """Immutable candidate track, as fetched from the discovery service."""

    model_config = ConfigDict(frozen=True)

    id: TrackIdField
    title: TrackTitleStr
    artist: NonEmptyStr
    album: str = ""
    features: AudioFeatures = Field(default_factory=AudioFeatures)

    # Opaque playback metadata, passed through to the rendering layer
    image_url: HttpUrlStr | None = None
    external_url: HttpUrlStr | None = None
    preview_url: HttpUrlStr | None = None
    duration_ms: NonNegativeInt | None = None
    popularity: NonNegativeInt | None = None
    explicit: bool = False

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS."""
        if self.duration_ms is None:
            return "Unknown"
        minutes, seconds = divmod(self.duration_ms // 1000, 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def display_title(self) -> str:
        return f"{self.artist} - {self.title}"


class PreferenceVector(BaseModel):
    """Normalized taste weights sent to the discovery service to bias selection."""

    model_config = ConfigDict(frozen=True)

    danceability: UnitInterval = 0.5
    energy: UnitInterval = 0.5
    valence: UnitInterval = 0.5
    tempo: UnitInterval = 0.5
    acousticness: UnitInterval = 0.5
    instrumentalness: UnitInterval = 0.5
    speechiness: UnitInterval = 0.5
    loudness: UnitInterval = 0.5

    def merged(self, partial: Mapping[str, float]) -> PreferenceVector:
        """Return a copy with *partial* shallow-merged and clamped into [0, 1].

        Raises:
            ValidationError: If a name is not a known feature or a value is not finite.
        """
        updates: dict[str, float] = {}
        for name, raw in partial.items():
            if name not in FEATURE_NAMES:
                raise ValidationError(
                    ErrorMessages.UNKNOWN_FEATURE.format(name=name, valid=", ".join(FEATURE_NAMES)),
                    field=name,
                )
            value = float(raw)
            if not math.isfinite(value):
                raise ValidationError(ErrorMessages.NON_FINITE_WEIGHT.format(name=name), field=name)
            updates[name] = clamp_unit(value)
        return self.model_copy(update=updates)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in FEATURE_NAMES}


class DiscoverySettings(BaseModel):
    """User-tunable discovery behaviour.

    The first four fields are owned by the remote service; haptics and
    animation speed only affect this client.
    """

    model_config = ConfigDict(frozen=True)

    REMOTE_FIELDS: ClassVar[tuple[str, ...]] = (
        "adaptive_learning",
        "exploration_factor",
        "diversity_boost",
        "feedback_sensitivity",
    )

    adaptive_learning: bool = True
    exploration_factor: UnitInterval = 0.3
    diversity_boost: UnitInterval = 0.2
    feedback_sensitivity: UnitInterval = 0.5
    haptic_feedback: bool = True
    animation_speed: PositiveFloat = 1.0

    def with_changes(self, **changes: Any) -> DiscoverySettings:
        """Return a validated copy with *changes* applied."""
        for name in changes:
            if name not in type(self).model_fields:
                raise ValidationError(ErrorMessages.UNKNOWN_SETTING.format(name=name), field=name)
        return type(self).model_validate({**self.model_dump(), **changes})

    def touches_remote(self, changes: Mapping[str, Any]) -> bool:
        return any(name in self.REMOTE_FIELDS for name in changes)


class UserMusicProfile(BaseModel):
    """Snapshot returned by the service's settings endpoint, used to rehydrate on mount."""

    model_config = ConfigDict(frozen=True)

    custom_weights: dict[str, float] = Field(default_factory=dict)
    feature_ranges: dict[str, Any] = Field(default_factory=dict)
    adaptive_learning: bool = True
    exploration_factor: UnitInterval = 0.3
    diversity_boost: UnitInterval = 0.2
    derived_preferences: dict[str, Any] = Field(default_factory=dict)
    total_feedback_received: NonNegativeInt = 0


class DiscoverBatch(BaseModel):
    """One response from the discovery endpoint."""

    model_config = ConfigDict(frozen=True)

    songs: list[Track] = Field(default_factory=list)
    strategy: str = ""
    total_found: NonNegativeInt = 0
    using_fallback: bool = False


# ── Gesture models ──────────────────────────────────────────────────


class GestureSample(BaseModel):
    """Latest pointer sample relative to the card's resting position.

    Deliberately unconstrained: malformed samples must reach the interpreter so
    they can be rejected as invalid gestures rather than crash validation.
    """

    model_config = ConfigDict(frozen=True)

    dx: float = 0.0
    dy: float = 0.0
    velocity: float = 0.0


class CardTransform(BaseModel):
    """Continuous render values for the top card."""

    model_config = ConfigDict(frozen=True)

    translate_x: float = 0.0
    translate_y: float = 0.0
    rotation_deg: float = 0.0

    @property
    def at_rest(self) -> bool:
        return self.translate_x == 0.0 and self.translate_y == 0.0 and self.rotation_deg == 0.0


class GestureReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: SwipeDirection = SwipeDirection.NONE
    transform: CardTransform = Field(default_factory=CardTransform)

    @property
    def committed(self) -> bool:
        return self.outcome.committed


class CardState(BaseModel):
    """Immutable snapshot of the discovery card handed to the rendering layer."""

    model_config = ConfigDict(frozen=True)

    phase: GesturePhase = GesturePhase.IDLE
    track: Track | None = None
    transform: CardTransform = Field(default_factory=CardTransform)
    loading: bool = False
    empty: bool = False
    queue_length: NonNegativeInt = 0

    @property
    def is_interactive(self) -> bool:
        return self.phase.is_interactive and self.track is not None
