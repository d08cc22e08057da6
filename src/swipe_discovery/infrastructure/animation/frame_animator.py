"""Frame-stepped animator driven by the asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from ...application.interfaces.animator import Animator
from ...domain.discovery.entities import CardTransform

FRAME_INTERVAL_MS = 16


def interpolate(start: CardTransform, end: CardTransform, progress: float) -> CardTransform:
    t = min(1.0, max(0.0, progress))
    return CardTransform(
        translate_x=start.translate_x + (end.translate_x - start.translate_x) * t,
        translate_y=start.translate_y + (end.translate_y - start.translate_y) * t,
        rotation_deg=start.rotation_deg + (end.rotation_deg - start.rotation_deg) * t,
    )


class FrameAnimator(Animator):
    """Steps a linear interpolation once per frame for a fixed duration.

    ``on_frame`` receives every intermediate transform; the duration does not
    depend on how far the card has to travel.
    """

    def __init__(
        self,
        on_frame: Callable[[CardTransform], None] | None = None,
        frame_interval_ms: int = FRAME_INTERVAL_MS,
    ) -> None:
        self._on_frame = on_frame
        self._frame_interval_ms = max(1, frame_interval_ms)

    async def animate(self, start: CardTransform, end: CardTransform, duration_ms: int) -> None:
        if duration_ms <= 0:
            self._emit(end)
            return

        loop = asyncio.get_running_loop()
        started = loop.time()
        duration_s = duration_ms / 1000
        while True:
            elapsed = loop.time() - started
            if elapsed >= duration_s:
                break
            self._emit(interpolate(start, end, elapsed / duration_s))
            await asyncio.sleep(min(self._frame_interval_ms / 1000, duration_s - elapsed))
        self._emit(end)

    def _emit(self, transform: CardTransform) -> None:
        if self._on_frame is not None:
            self._on_frame(transform)
