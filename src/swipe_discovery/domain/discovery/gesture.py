"""Gesture interpretation: pointer samples in, swipe outcome and render transform out."""

from __future__ import annotations

import math

from swipe_discovery.domain.discovery.entities import CardTransform, GestureReading, GestureSample
from swipe_discovery.domain.discovery.value_objects import SwipeDirection
from swipe_discovery.domain.shared.exceptions import InvalidGestureError
from swipe_discovery.domain.shared.messages import ErrorMessages

DEFAULT_COMMIT_RATIO = 0.2
DEFAULT_VELOCITY_FLOOR = 800.0
DEFAULT_MAX_ROTATION_DEG = 15.0
DEFAULT_ROTATION_PER_PX = 0.1
DEFAULT_TAP_SLOP_PX = 8.0


class GestureInterpreter:
    """Classifies drags into swipe outcomes.

    A release commits when ``|dx|`` is strictly greater than ``commit_ratio``
    of the card width, or ``|velocity|`` is strictly greater than
    ``velocity_floor``. Direction is the sign of ``dx``. A release whose
    translation stays within ``tap_slop_px`` (capped at the distance
    threshold) is a tap and never commits, however fast the pointer moved.

    The interpreter holds no state besides its constants; the same sample
    always yields the same reading.
    """

    def __init__(
        self,
        *,
        commit_ratio: float = DEFAULT_COMMIT_RATIO,
        velocity_floor: float = DEFAULT_VELOCITY_FLOOR,
        max_rotation_deg: float = DEFAULT_MAX_ROTATION_DEG,
        rotation_per_px: float = DEFAULT_ROTATION_PER_PX,
        tap_slop_px: float = DEFAULT_TAP_SLOP_PX,
    ) -> None:
        self.commit_ratio = commit_ratio
        self.velocity_floor = velocity_floor
        self.max_rotation_deg = max_rotation_deg
        self.rotation_per_px = rotation_per_px
        self.tap_slop_px = tap_slop_px

    def commit_threshold(self, card_width: float) -> float:
        return card_width * self.commit_ratio

    def rotation_for(self, dx: float) -> float:
        """Rotation is linear in dx, clamped to ±max_rotation_deg."""
        rotation = dx * self.rotation_per_px
        return max(-self.max_rotation_deg, min(self.max_rotation_deg, rotation))

    def track(self, sample: GestureSample, card_width: float) -> CardTransform:
        """Transform for a card that is still under the pointer."""
        self._validate(sample, card_width)
        return CardTransform(
            translate_x=sample.dx,
            translate_y=sample.dy,
            rotation_deg=self.rotation_for(sample.dx),
        )

    def release(self, sample: GestureSample, card_width: float) -> GestureReading:
        """Classify a pointer release.

        Raises:
            InvalidGestureError: If the sample holds a non-finite value or the
                card width is not positive.
        """
        self._validate(sample, card_width)

        if not self.is_commit(sample, card_width):
            return GestureReading(outcome=SwipeDirection.NONE, transform=CardTransform())

        return GestureReading(
            outcome=SwipeDirection.from_dx(sample.dx),
            transform=CardTransform(
                translate_x=sample.dx,
                translate_y=sample.dy,
                rotation_deg=self.rotation_for(sample.dx),
            ),
        )

    def is_commit(self, sample: GestureSample, card_width: float) -> bool:
        distance = abs(sample.dx)
        threshold = self.commit_threshold(card_width)
        # The slop never reaches past the distance threshold on narrow cards
        if distance <= min(self.tap_slop_px, threshold):
            return False
        past_distance = distance > threshold
        past_velocity = abs(sample.velocity) > self.velocity_floor
        return past_distance or past_velocity

    @staticmethod
    def _validate(sample: GestureSample, card_width: float) -> None:
        for field in ("dx", "dy", "velocity"):
            if not math.isfinite(getattr(sample, field)):
                raise InvalidGestureError(
                    ErrorMessages.NON_FINITE_SAMPLE.format(field=field), field=field
                )
        if not math.isfinite(card_width) or card_width <= 0:
            raise InvalidGestureError(ErrorMessages.INVALID_CARD_WIDTH, field="card_width")
