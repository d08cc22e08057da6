"""Discovery Session Controller - owns the visible card and its transitions."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.discovery.entities import CardState, CardTransform, GestureSample
from ...domain.discovery.value_objects import GesturePhase, SwipeDirection
from ...domain.shared.events import CardCommitted, DomainEvent
from ...domain.shared.exceptions import InvalidGestureError, InvalidOperationError, NetworkFailure
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.discovery.entities import Track
    from ...domain.discovery.gesture import GestureInterpreter
    from ...domain.discovery.value_objects import TrackId
    from ...domain.shared.events import EventBus
    from ..interfaces.animator import Animator
    from ..interfaces.discovery_api import DiscoveryAPI
    from ..interfaces.haptics import HapticEngine
    from .background import BackgroundTasks
    from .preference_store import PreferenceStore
    from .track_queue import TrackQueueManager

logger = logging.getLogger(__name__)

EXIT_ANIMATION_MS = 200
RESET_ANIMATION_MS = 150
HAPTIC_INTENSITY = 0.5
DEFAULT_CARD_WIDTH = 360.0
# Exit target as a multiple of the card width, far enough to leave the screen
EXIT_DISTANCE_FACTOR = 1.5


class DiscoverySessionController:
    """Runs the swipe loop: gesture -> commit -> feedback -> exit animation -> advance.

    Gesture state lives here as an explicit ``GesturePhase`` and is exposed to
    the rendering layer only as an immutable ``CardState``. While a card is
    COMMITTING or RESETTING every gesture is ignored.

    Network calls (feedback, settings pushes, refills) are fire-and-forget;
    the only thing a commit waits for is its own exit animation.
    """

    def __init__(
        self,
        *,
        queue: TrackQueueManager,
        api: DiscoveryAPI,
        preferences: PreferenceStore,
        interpreter: GestureInterpreter,
        animator: Animator,
        haptics: HapticEngine,
        tasks: BackgroundTasks,
        event_bus: EventBus | None = None,
        exit_animation_ms: int = EXIT_ANIMATION_MS,
        reset_animation_ms: int = RESET_ANIMATION_MS,
        haptic_intensity: float = HAPTIC_INTENSITY,
        card_width: float = DEFAULT_CARD_WIDTH,
    ) -> None:
        self._queue = queue
        self._api = api
        self._preferences = preferences
        self._interpreter = interpreter
        self._animator = animator
        self._haptics = haptics
        self._tasks = tasks
        self._bus = event_bus
        self._exit_ms = exit_animation_ms
        self._reset_ms = reset_animation_ms
        self._haptic_intensity = haptic_intensity
        self._card_width = card_width

        self._phase = GesturePhase.IDLE
        self._transform = CardTransform()
        self._transition: asyncio.Task[None] | None = None
        self._mounted = False
        self._disposed = False

    # === State ===

    @property
    def phase(self) -> GesturePhase:
        return self._phase

    @property
    def state(self) -> CardState:
        track = self._queue.current()
        waiting = track is None and self._queue.is_refilling
        return CardState(
            phase=self._phase,
            track=track,
            transform=self._transform,
            loading=waiting,
            empty=track is None and not waiting,
            queue_length=len(self._queue),
        )

    async def wait_for_transition(self) -> None:
        """Block until the running exit or reset animation has resolved."""
        task = self._transition
        if task is not None and not task.done():
            await task

    @property
    def mounted(self) -> bool:
        return self._mounted

    # === Lifecycle ===

    async def mount(self) -> CardState:
        """Rehydrate preferences from the service, then load the first window."""
        if self._disposed:
            raise InvalidOperationError(operation="mount", current_state="disposed")
        if self._mounted:
            return self.state

        try:
            profile = await self._api.get_settings()
        except NetworkFailure as exc:
            logger.warning(LogTemplates.SESSION_REHYDRATE_FAILED, exc.message)
        except Exception as exc:
            logger.warning(LogTemplates.SESSION_REHYDRATE_FAILED, exc)
        else:
            self._preferences.rehydrate(profile)

        self._mounted = True
        await self._queue.fill()
        logger.info(LogTemplates.SESSION_MOUNTED, len(self._queue))
        return self.state

    async def unmount(self) -> None:
        """Cancel the running transition and the pending refill."""
        if self._disposed:
            return
        self._disposed = True
        self._mounted = False
        await self._queue.close()

        task, self._transition = self._transition, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # In-flight feedback and preference pushes may still land
        self._tasks.close()
        logger.info(LogTemplates.SESSION_UNMOUNTED)

    # === Gestures ===

    def begin_drag(self) -> CardState:
        if not self._accepts_gesture("begin_drag"):
            return self.state
        if self._phase is GesturePhase.IDLE:
            self._set_phase(GesturePhase.DRAGGING)
        return self.state

    def drag(self, sample: GestureSample, card_width: float | None = None) -> CardState:
        """Follow the pointer; the card stays interactive."""
        if not self._accepts_gesture("drag"):
            return self.state

        width = self._card_width if card_width is None else card_width
        try:
            transform = self._interpreter.track(sample, width)
        except InvalidGestureError as exc:
            logger.debug(LogTemplates.GESTURE_INVALID, exc.message)
            return self.state

        self._card_width = width
        if self._phase is GesturePhase.IDLE:
            self._set_phase(GesturePhase.DRAGGING)
        self._transform = transform
        return self.state

    def release(self, sample: GestureSample, card_width: float | None = None) -> CardState:
        """Classify the release: commit past threshold, spring back otherwise."""
        if not self._accepts_gesture("release"):
            return self.state

        width = self._card_width if card_width is None else card_width
        try:
            reading = self._interpreter.release(sample, width)
        except InvalidGestureError as exc:
            logger.debug(LogTemplates.GESTURE_INVALID, exc.message)
            return self.state

        self._card_width = width
        if reading.committed:
            previous = self._transform
            self._transform = reading.transform
            if self.handle_commit(reading.outcome):
                return self.state
            self._transform = previous

        if self._phase is GesturePhase.IDLE:
            return self.state

        logger.debug(LogTemplates.GESTURE_SPRING_BACK)
        start = self._transform
        self._set_phase(GesturePhase.RESETTING)
        self._transform = CardTransform()
        self._transition = self._tasks.spawn(self._spring_back(start), name="card-reset")
        return self.state

    def handle_commit(self, direction: SwipeDirection) -> bool:
        """Commit the current card in *direction*.

        Returns False when the commit is ignored: mid-transition, no card on
        screen, or an uncommitted direction.
        """
        if not self._accepts_gesture("commit") or not direction.committed:
            return False

        track = self._queue.current()
        if track is None:
            logger.debug(LogTemplates.CARD_NO_TRACK)
            # A swipe on an empty deck asks the service again
            self.retry()
            return False

        self._set_phase(GesturePhase.COMMITTING)

        # Dispatch before the queue can drop the track
        self._dispatch_feedback(track, direction)

        if self._preferences.settings.haptic_feedback:
            self._pulse()

        logger.info(LogTemplates.CARD_COMMITTED, direction.value, track.id, direction.rating)
        self._publish(
            CardCommitted(
                track_id=str(track.id),
                direction=direction.value,
                rating=direction.rating,
                label=direction.label,
            )
        )

        self._transition = self._tasks.spawn(self._exit(direction), name="card-exit")
        return True

    def retry(self) -> bool:
        """Request tracks again after the deck ran dry or the last fetch failed.

        Only a user action calls this; failed refills are never retried on a
        timer. Returns False when a card is showing, a refill is already in
        flight, or the session is not mounted.
        """
        if self._disposed or not self._mounted or self._queue.current() is not None:
            return False
        if not self._queue.request_refill():
            return False
        logger.info(LogTemplates.SESSION_RETRY)
        return True

    # === Transitions ===

    async def _exit(self, direction: SwipeDirection) -> None:
        start = self._transform
        end = CardTransform(
            translate_x=direction.sign * self._card_width * EXIT_DISTANCE_FACTOR,
            translate_y=start.translate_y,
            rotation_deg=direction.sign * self._interpreter.max_rotation_deg,
        )
        await self._run_animation(start, end, self._exit_ms)

        self._queue.advance()
        self._set_phase(GesturePhase.RESETTING)
        self._transform = CardTransform()
        self._set_phase(GesturePhase.IDLE)

    async def _spring_back(self, start: CardTransform) -> None:
        await self._run_animation(start, CardTransform(), self._reset_ms)
        self._set_phase(GesturePhase.IDLE)

    async def _run_animation(self, start: CardTransform, end: CardTransform, duration_ms: int) -> None:
        speed = self._preferences.settings.animation_speed
        try:
            await self._animator.animate(start, end, round(duration_ms / speed))
        except asyncio.CancelledError:
            raise
        except Exception:
            # A broken animation must not strand the card mid-transition
            logger.exception("Card animation failed")

    def _pulse(self) -> None:
        try:
            self._haptics.pulse(self._haptic_intensity)
        except Exception:
            logger.exception(LogTemplates.HAPTIC_FAILED)

    # === Feedback ===

    def _dispatch_feedback(self, track: Track, direction: SwipeDirection) -> None:
        # One submission per commit; the COMMITTING guard rules out a second
        self._tasks.spawn(
            self._submit_feedback(track.id, direction.rating, direction.label),
            name=f"feedback-{track.id}",
        )

    async def _submit_feedback(self, track_id: TrackId, rating: float, label: str) -> None:
        try:
            await self._api.submit_feedback(track_id, rating, label)
        except NetworkFailure as exc:
            logger.warning(LogTemplates.FEEDBACK_FAILED, track_id, exc.message)
        except Exception as exc:
            logger.warning(LogTemplates.FEEDBACK_FAILED, track_id, exc)

    # === Helpers ===

    def _accepts_gesture(self, action: str) -> bool:
        if self._disposed or not self._phase.is_interactive:
            logger.debug(LogTemplates.GESTURE_IGNORED, action, self._phase.value)
            return False
        return True

    def _set_phase(self, target: GesturePhase) -> None:
        if target is self._phase:
            return
        if not self._phase.can_transition_to(target):
            raise InvalidOperationError(
                operation=f"transition to {target.value}",
                current_state=self._phase.value,
            )
        self._phase = target

    def _publish(self, event: DomainEvent) -> None:
        if self._bus is None or not self._bus.has_subscribers(type(event)):
            return
        self._tasks.spawn(self._bus.publish(event), name=f"publish-{type(event).__name__}")
