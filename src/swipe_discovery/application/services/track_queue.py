"""Track Queue Manager - bounded look-ahead buffer with background refill."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING

from ...domain.discovery.value_objects import QueuePhase
from ...domain.shared.events import DomainEvent, QueueExhausted, QueueRefilled, QueueRefillFailed
from ...domain.shared.exceptions import EmptyResult, NetworkFailure, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.discovery.entities import Track
    from ...domain.shared.events import EventBus
    from ..interfaces.discovery_api import DiscoveryAPI
    from .background import BackgroundTasks
    from .preference_store import PreferenceStore

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5
DEFAULT_LOW_WATER_MARK = 2


class TrackQueueManager:
    """Owns the queue of upcoming tracks; nothing else mutates it.

    The head of the queue is the current card. Consumption never waits on the
    network: ``advance`` pops synchronously and, once the remaining length is
    at or below the low-water mark, schedules a refill in the background. A
    single in-flight refill task guards against duplicate requests when
    ``advance`` is called in quick succession.

    A failed refill is not retried on a timer; the next ``advance`` that finds
    the queue low again issues a new request.
    """

    def __init__(
        self,
        *,
        api: DiscoveryAPI,
        preferences: PreferenceStore,
        tasks: BackgroundTasks,
        event_bus: EventBus | None = None,
        capacity: int = DEFAULT_CAPACITY,
        low_water_mark: int = DEFAULT_LOW_WATER_MARK,
    ) -> None:
        if low_water_mark >= capacity:
            raise ValidationError(ErrorMessages.LOW_WATER_MARK_TOO_HIGH, field="low_water_mark")

        self._api = api
        self._preferences = preferences
        self._tasks = tasks
        self._bus = event_bus
        self._capacity = capacity
        self._low_water_mark = low_water_mark

        self._queue: deque[Track] = deque()
        self._refill_task: asyncio.Task[int] | None = None
        self._primed = False
        self._fetched = False
        self._closed = False

    # === Read side ===

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def low_water_mark(self) -> int:
        return self._low_water_mark

    def __len__(self) -> int:
        return len(self._queue)

    def current(self) -> Track | None:
        """The track on the visible card, or None when the buffer is empty."""
        return self._queue[0] if self._queue else None

    def snapshot(self) -> tuple[Track, ...]:
        return tuple(self._queue)

    def is_low(self) -> bool:
        return len(self._queue) <= self._low_water_mark

    @property
    def is_refilling(self) -> bool:
        return self._refill_task is not None and not self._refill_task.done()

    @property
    def is_exhausted(self) -> bool:
        """Empty with nothing in flight, after at least one answered request."""
        return self._fetched and not self._queue and not self.is_refilling

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def phase(self) -> QueuePhase:
        if not self._primed:
            return QueuePhase.FILLING
        if self.is_low():
            return QueuePhase.DRAINING
        return QueuePhase.READY

    # === Write side ===

    async def fill(self) -> int:
        """Initial load: request a full window and wait for it to land."""
        self.request_refill()
        task = self._refill_task
        if task is None or task.done():
            return 0
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if self._closed:
                return 0
            raise

    def advance(self) -> None:
        """Drop the current track and top up the buffer if it is running low."""
        if self._closed:
            return

        if self._queue:
            finished = self._queue.popleft()
            logger.debug(LogTemplates.QUEUE_ADVANCED, finished.id, len(self._queue))
        else:
            finished = None

        if self.is_low():
            self.request_refill()

        if not self._queue and not self.is_refilling:
            logger.info(LogTemplates.QUEUE_EXHAUSTED)
            self._publish(QueueExhausted(last_track_id=str(finished.id) if finished else None))

    def request_refill(self) -> bool:
        """Schedule a refill unless one is already in flight. Returns True if scheduled."""
        if self._closed or len(self._queue) >= self._capacity:
            return False
        if self.is_refilling:
            logger.debug(LogTemplates.QUEUE_REFILL_IN_FLIGHT)
            return False

        self._refill_task = self._tasks.spawn(self._refill(), name="queue-refill")
        return self._refill_task is not None

    async def close(self) -> None:
        """Cancel the pending refill; late results are never applied."""
        if self._closed:
            return
        self._closed = True
        task, self._refill_task = self._refill_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug(LogTemplates.QUEUE_CLOSED)

    # === Refill ===

    async def _refill(self) -> int:
        try:
            return await self._fetch_and_append()
        except EmptyResult:
            logger.info(LogTemplates.QUEUE_EMPTY_RESULT)
            if not self._queue:
                self._publish(QueueExhausted())
            return 0
        except NetworkFailure as exc:
            logger.warning(LogTemplates.QUEUE_REFILL_FAILED, len(self._queue), exc.message)
            self._publish(QueueRefillFailed(reason=exc.message, queue_length=len(self._queue)))
            return 0
        except Exception as exc:
            logger.warning(LogTemplates.QUEUE_REFILL_FAILED, len(self._queue), exc)
            self._publish(QueueRefillFailed(reason=str(exc), queue_length=len(self._queue)))
            return 0

    async def _fetch_and_append(self) -> int:
        wanted = self._capacity - len(self._queue)
        logger.debug(LogTemplates.QUEUE_FILL_STARTED, wanted, len(self._queue))

        batch = await self._api.discover(self._preferences.vector, wanted)

        if self._closed:
            logger.debug(LogTemplates.QUEUE_REFILL_DISCARDED)
            return 0

        self._fetched = True
        if not batch.songs:
            raise EmptyResult(requested=wanted)

        # The service may re-send tracks already on screen or repeat within a batch
        held = {track.id for track in self._queue}
        added = 0
        dropped = 0
        for track in batch.songs:
            if track.id in held:
                dropped += 1
                continue
            if len(self._queue) >= self._capacity:
                break
            self._queue.append(track)
            held.add(track.id)
            added += 1

        if len(self._queue) >= self._capacity:
            self._primed = True

        logger.info(LogTemplates.QUEUE_FILLED, added, dropped, len(self._queue))
        self._publish(
            QueueRefilled(added=added, duplicates_dropped=dropped, queue_length=len(self._queue))
        )
        return added

    def _publish(self, event: DomainEvent) -> None:
        if self._bus is None or not self._bus.has_subscribers(type(event)):
            return
        self._tasks.spawn(self._bus.publish(event), name=f"publish-{type(event).__name__}")
