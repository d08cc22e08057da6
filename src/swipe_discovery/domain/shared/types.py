"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the discovery context is defined here once,
so models can simply annotate their fields::

    from swipe_discovery.domain.shared.types import NonEmptyStr, UnitInterval

    class MyModel(BaseModel):
        title: NonEmptyStr
        weight: UnitInterval
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveFloat = Annotated[float, Field(gt=0.0)]
"""Float > 0.0."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0, allow_inf_nan=False)]
"""Float in [0.0, 1.0]: preference weights, ratings and tuning factors."""

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
"""Any finite float."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Settings-specific constraints ──────────────────────────────────

QueueCapacity = Annotated[int, Field(gt=0, le=50)]
"""Look-ahead buffer capacity: 1 … 50."""

AnimationMs = Annotated[int, Field(ge=0, le=5000)]
"""Animation duration in milliseconds: 0 … 5 000."""

TimeoutSeconds = Annotated[float, Field(ge=1.0, le=60.0)]
"""HTTP timeout in seconds: 1 … 60."""
