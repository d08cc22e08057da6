"""Terminal front-end: renders the current card and turns keys into swipes."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from ...domain.discovery.entities import CardState, GestureSample
from ...domain.discovery.value_objects import SwipeDirection
from ...domain.shared.events import (
    CardCommitted,
    PreferencesChanged,
    QueueExhausted,
    QueueRefilled,
    QueueRefillFailed,
)
from ...domain.shared.exceptions import DomainError

if TYPE_CHECKING:
    from ...application.services.preference_store import PreferenceStore
    from ...application.services.session_controller import DiscoverySessionController
    from ...domain.shared.events import EventBus


Reader = Callable[[str], Awaitable[str]]
Writer = Callable[[str], None]

PROMPT = "[a] dislike  [d] love  [r] retry  [p k=v] weights  [s k=v] settings  [q] quit > "
HELP = (
    "a / left         swipe left (dislike)\n"
    "d / right        swipe right (love)\n"
    "r / retry        ask the service for tracks again\n"
    "p energy=0.8 ... update preference weights\n"
    "s diversity_boost=0.4 ... update discovery settings\n"
    "q / quit         leave"
)
EMPTY_DECK = "No more tracks right now. Press r to ask again or adjust weights with p."
REFILL_FAILED = "! Could not reach the discovery service ({reason}). Press r to retry."
# A keyboard swipe drags half the card width
KEY_SWIPE_RATIO = 0.5


async def _stdin_reader(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


def parse_assignments(tokens: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` tokens; values become bool or float where possible."""
    parsed: dict[str, Any] = {}
    for token in tokens:
        key, sep, raw = token.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {token!r}")
        lowered = raw.strip().lower()
        if lowered in {"true", "on", "yes"}:
            parsed[key] = True
        elif lowered in {"false", "off", "no"}:
            parsed[key] = False
        else:
            parsed[key] = float(raw)
    return parsed


def render(state: CardState) -> str:
    if state.loading:
        return "… loading more tracks"
    if state.track is None:
        return EMPTY_DECK
    track = state.track
    album = f" ({track.album})" if track.album else ""
    return f"♪ {track.display_title}{album}  [{state.queue_length} queued]"


class TerminalApp:
    """Line-oriented session loop.

    Commands drive the controller directly; queue and preference events
    arriving from the background are reported as they land.
    """

    def __init__(
        self,
        *,
        controller: DiscoverySessionController,
        preferences: PreferenceStore,
        event_bus: EventBus,
        card_width: float,
        reader: Reader | None = None,
        writer: Writer = print,
    ) -> None:
        self._controller = controller
        self._preferences = preferences
        self._bus = event_bus
        self._card_width = card_width
        self._read = reader or _stdin_reader
        self._write = writer
        self._shown: str | None = None
        self._card_shown = False
        self.loved = 0
        self.disliked = 0

    async def run(self) -> int:
        subscriptions = [
            (CardCommitted, self._on_committed),
            (QueueRefilled, self._on_refilled),
            (QueueRefillFailed, self._on_refill_failed),
            (QueueExhausted, self._on_exhausted),
            (PreferencesChanged, self._on_preferences_changed),
        ]
        for event_type, handler in subscriptions:
            self._bus.subscribe(event_type, handler)
        try:
            await self._loop()
        finally:
            for event_type, handler in subscriptions:
                self._bus.unsubscribe(event_type, handler)

        rated = self.loved + self.disliked
        self._write(f"Rated {rated} tracks: {self.loved} loved, {self.disliked} disliked")
        return 0

    async def _loop(self) -> None:
        await self._controller.mount()
        self._refresh()

        while True:
            try:
                line = (await self._read(PROMPT)).strip()
            except EOFError:
                break
            if not line:
                continue

            command, *args = line.split()
            command = command.lower()
            if command in {"q", "quit", "exit"}:
                break

            try:
                self._dispatch(command, args)
            except (DomainError, ValueError) as exc:
                self._write(f"! {exc}")
                continue

            await self._controller.wait_for_transition()
            self._refresh()

    def _dispatch(self, command: str, args: list[str]) -> None:
        if command in {"a", "left"}:
            self._swipe(-1)
        elif command in {"d", "right"}:
            self._swipe(1)
        elif command in {"r", "retry"}:
            if not self._controller.retry():
                self._write("Nothing to retry.")
        elif command == "p":
            self._preferences.update(parse_assignments(args))
            # New weights are worth another request when the deck is empty
            self._controller.retry()
        elif command == "s":
            settings = self._preferences.update_settings(**parse_assignments(args))
            self._write(str(settings.model_dump()))
        else:
            self._write(HELP)

    def _swipe(self, sign: int) -> None:
        dx = sign * self._card_width * KEY_SWIPE_RATIO
        self._controller.begin_drag()
        self._controller.drag(GestureSample(dx=dx), self._card_width)
        self._controller.release(GestureSample(dx=dx), self._card_width)

    def _refresh(self) -> None:
        """Render the card unless the screen already shows exactly that."""
        state = self._controller.state
        text = render(state)
        self._card_shown = state.track is not None
        if text != self._shown:
            self._shown = text
            self._write(text)

    # === Event handlers ===

    async def _on_committed(self, event: CardCommitted) -> None:
        if SwipeDirection(event.direction) is SwipeDirection.RIGHT:
            self.loved += 1
        else:
            self.disliked += 1

    async def _on_refilled(self, event: QueueRefilled) -> None:
        # Tracks landed behind an empty or loading card
        if event.added and not self._card_shown:
            self._refresh()

    async def _on_refill_failed(self, event: QueueRefillFailed) -> None:
        self._write(REFILL_FAILED.format(reason=event.reason))

    async def _on_exhausted(self, event: QueueExhausted) -> None:
        self._refresh()

    async def _on_preferences_changed(self, event: PreferencesChanged) -> None:
        self._write(", ".join(f"{k}={v:.2f}" for k, v in event.weights.items()))
