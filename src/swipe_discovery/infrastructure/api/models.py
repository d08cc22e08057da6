"""Wire models for the discovery REST API (camelCase on the wire)."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from swipe_discovery.domain.discovery.entities import (
    AudioFeatures,
    DiscoverBatch,
    DiscoverySettings,
    PreferenceVector,
    Track,
    UserMusicProfile,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TrackPayload(_WireModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "title"))
    artist: str = Field(..., min_length=1)
    album: str = ""
    image_url: str | None = Field(default=None, alias="imageUrl")
    spotify_url: str | None = Field(default=None, alias="spotifyUrl")
    preview_url: str | None = Field(default=None, alias="previewUrl")
    duration: int | None = None
    popularity: int | None = None
    explicit: bool = False
    audio_features: dict[str, float | None] = Field(
        default_factory=dict, validation_alias=AliasChoices("audioFeatures", "features")
    )

    def to_domain(self) -> Track:
        return Track(
            id=self.id,
            title=self.name,
            artist=self.artist,
            album=self.album,
            features=AudioFeatures.model_validate(self.audio_features),
            image_url=self.image_url or None,
            external_url=self.spotify_url or None,
            preview_url=self.preview_url or None,
            duration_ms=self.duration,
            popularity=self.popularity,
            explicit=self.explicit,
        )


class DiscoverResponse(_WireModel):
    songs: list[TrackPayload] = Field(default_factory=list)
    strategy: str = ""
    timestamp: str | None = None
    total_found: int = Field(default=0, alias="totalFound")
    using_spotify_fallback: bool = Field(default=False, alias="usingSpotifyFallback")

    def to_domain(self) -> DiscoverBatch:
        return DiscoverBatch(
            songs=[song.to_domain() for song in self.songs],
            strategy=self.strategy,
            total_found=max(0, self.total_found),
            using_fallback=self.using_spotify_fallback,
        )


class ProfilePayload(_WireModel):
    custom_weights: dict[str, float] = Field(default_factory=dict, alias="customWeights")
    feature_ranges: dict[str, Any] | None = Field(default=None, alias="featureRanges")
    adaptive_learning: bool = Field(default=True, alias="adaptiveLearning")
    exploration_factor: float = Field(default=0.3, alias="explorationFactor")
    diversity_boost: float = Field(default=0.2, alias="diversityBoost")
    derived_preferences: dict[str, Any] | None = Field(default=None, alias="derivedPreferences")
    total_feedback_received: int = Field(default=0, alias="totalFeedbackReceived")

    def to_domain(self) -> UserMusicProfile:
        return UserMusicProfile(
            custom_weights=self.custom_weights,
            feature_ranges=self.feature_ranges or {},
            adaptive_learning=self.adaptive_learning,
            exploration_factor=self.exploration_factor,
            diversity_boost=self.diversity_boost,
            derived_preferences=self.derived_preferences or {},
            total_feedback_received=self.total_feedback_received,
        )


def discover_body(preferences: PreferenceVector, count: int, strategy: str) -> dict[str, Any]:
    return {"preferences": preferences.as_dict(), "count": count, "strategy": strategy}


def feedback_body(track_id: str, rating: float, label: str) -> dict[str, Any]:
    return {"trackId": track_id, "rating": rating, "feedback": label}


def settings_body(settings: DiscoverySettings) -> dict[str, Any]:
    return {
        "adaptiveLearning": settings.adaptive_learning,
        "explorationFactor": settings.exploration_factor,
        "diversityBoost": settings.diversity_boost,
        "feedbackSensitivity": settings.feedback_sensitivity,
    }
