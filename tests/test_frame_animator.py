"""Tests for the frame-stepped animator."""

import pytest

from swipe_discovery.domain.discovery.entities import CardTransform
from swipe_discovery.infrastructure.animation.frame_animator import FrameAnimator, interpolate

START = CardTransform()
END = CardTransform(translate_x=300.0, translate_y=-20.0, rotation_deg=15.0)


class TestInterpolate:
    def test_midpoint(self):
        mid = interpolate(START, END, 0.5)

        assert mid.translate_x == 150.0
        assert mid.translate_y == -10.0
        assert mid.rotation_deg == 7.5

    @pytest.mark.parametrize(("progress", "expected"), [(-1.0, 0.0), (2.0, 300.0)])
    def test_progress_is_clamped(self, progress, expected):
        assert interpolate(START, END, progress).translate_x == expected


class TestFrameAnimator:
    """Tests for FrameAnimator.animate."""

    async def test_ends_exactly_at_target(self):
        frames = []
        animator = FrameAnimator(on_frame=frames.append, frame_interval_ms=5)

        await animator.animate(START, END, 30)

        assert frames[-1] == END
        assert len(frames) >= 2

    async def test_frames_move_monotonically(self):
        frames = []
        animator = FrameAnimator(on_frame=frames.append, frame_interval_ms=5)

        await animator.animate(START, END, 30)

        xs = [frame.translate_x for frame in frames]
        assert xs == sorted(xs)

    async def test_zero_duration_jumps_to_end(self):
        frames = []

        await FrameAnimator(on_frame=frames.append).animate(START, END, 0)

        assert frames == [END]

    async def test_without_frame_callback(self):
        await FrameAnimator().animate(START, END, 10)
