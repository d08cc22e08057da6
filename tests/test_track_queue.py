"""
Unit Tests for the Track Queue Manager

Tests for:
- Initial fill and capacity bounds
- Background refill at the low-water mark
- Duplicate suppression across the buffer and within a batch
- Single in-flight refill guard
- Failure handling and retry on the next advance
- Empty results and exhaustion
- Close semantics (late results are discarded)
- Queue phases
"""

import asyncio
import random

import pytest
from fakes import make_tracks, network_failure, settle

from swipe_discovery.application.services.track_queue import TrackQueueManager
from swipe_discovery.domain.discovery.value_objects import QueuePhase
from swipe_discovery.domain.shared.events import QueueExhausted, QueueRefilled, QueueRefillFailed
from swipe_discovery.domain.shared.exceptions import ValidationError


def ids(queue):
    return [str(track.id) for track in queue.snapshot()]


def recorder(bus, event_type):
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe(event_type, handler)
    return received


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    """Tests for queue configuration checks."""

    def test_low_water_mark_must_be_below_capacity(self, fake_api, preference_store, tasks):
        """Should reject a low-water mark that is not below capacity."""
        with pytest.raises(ValidationError) as exc_info:
            TrackQueueManager(
                api=fake_api,
                preferences=preference_store,
                tasks=tasks,
                capacity=2,
                low_water_mark=2,
            )

        assert exc_info.value.field == "low_water_mark"

    def test_starts_empty_and_filling(self, track_queue):
        assert len(track_queue) == 0
        assert track_queue.current() is None
        assert track_queue.phase is QueuePhase.FILLING
        assert track_queue.is_exhausted is False


# =============================================================================
# Fill / Advance
# =============================================================================


class TestFillAndAdvance:
    """Tests for the initial load and consumption."""

    async def test_fill_requests_full_window(self, track_queue, fake_api):
        """Should request capacity tracks and wait for them."""
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E")]

        added = await track_queue.fill()

        assert added == 5
        assert fake_api.discover_calls[0][1] == 5
        assert ids(track_queue) == ["A", "B", "C", "D", "E"]
        assert str(track_queue.current().id) == "A"

    async def test_fill_sends_current_preferences(self, track_queue, fake_api, preference_store):
        preference_store.update({"energy": 0.9})
        fake_api.responses = [make_tracks("A")]

        await track_queue.fill()

        vector, _ = fake_api.discover_calls[0]
        assert vector["energy"] == 0.9

    async def test_oversized_batch_is_truncated(self, track_queue, fake_api):
        """Should never hold more than capacity tracks."""
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E", "F", "G")]

        await track_queue.fill()

        assert ids(track_queue) == ["A", "B", "C", "D", "E"]

    async def test_duplicates_within_batch_dropped(self, track_queue, fake_api):
        fake_api.responses = [make_tracks("A", "B", "A", "C")]

        await track_queue.fill()

        assert ids(track_queue) == ["A", "B", "C"]

    async def test_advance_above_low_water_mark_does_not_fetch(self, track_queue, fake_api):
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E")]
        await track_queue.fill()

        track_queue.advance()
        track_queue.advance()
        await settle()

        assert ids(track_queue) == ["C", "D", "E"]
        assert len(fake_api.discover_calls) == 1

    async def test_refill_at_low_water_mark_with_resent_track(self, track_queue, fake_api, tasks):
        """Should top up in the background and drop a track already held."""
        fake_api.responses = [
            make_tracks("A", "B", "C", "D", "E"),
            make_tracks("D", "F", "G", "H"),
        ]
        await track_queue.fill()

        for _ in range(3):
            track_queue.advance()

        assert ids(track_queue) == ["D", "E"]
        assert track_queue.is_refilling is True

        await tasks.wait()

        assert ids(track_queue) == ["D", "E", "F", "G", "H"]
        assert fake_api.discover_calls[1][1] == 3

    async def test_advance_never_waits_on_network(self, track_queue, fake_api):
        """Should pop synchronously even while a refill is blocked."""
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E"), make_tracks("F")]
        await track_queue.fill()
        fake_api.gate = asyncio.Event()

        for _ in range(4):
            track_queue.advance()

        assert ids(track_queue) == ["E"]
        fake_api.gate.set()
        await track_queue.close()

    async def test_refilled_event_reports_duplicates(self, track_queue, fake_api, tasks, event_bus):
        refilled = recorder(event_bus, QueueRefilled)
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E"), make_tracks("E", "F")]
        await track_queue.fill()

        for _ in range(3):
            track_queue.advance()
        await tasks.wait()

        assert refilled[-1].added == 1
        assert refilled[-1].duplicates_dropped == 1
        assert refilled[-1].queue_length == 3


# =============================================================================
# In-flight Guard
# =============================================================================


class TestInFlightGuard:
    """At most one refill request may be outstanding."""

    async def test_rapid_advances_issue_one_request(self, track_queue, fake_api, tasks):
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E"), make_tracks("F", "G", "H")]
        await track_queue.fill()
        fake_api.gate = asyncio.Event()

        for _ in range(4):
            track_queue.advance()
        await settle()

        assert len(fake_api.discover_calls) == 2
        assert track_queue.request_refill() is False

        fake_api.gate.set()
        await tasks.wait()

        assert ids(track_queue) == ["E", "F", "G", "H"]

    async def test_request_refill_skipped_when_full(self, track_queue, fake_api):
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E")]
        await track_queue.fill()

        assert track_queue.request_refill() is False
        assert len(fake_api.discover_calls) == 1


# =============================================================================
# Failures
# =============================================================================


class TestRefillFailures:
    """Failed refills leave the queue intact and are retried on demand."""

    async def test_failure_keeps_queue_and_retries_on_next_advance(
        self, track_queue, fake_api, tasks, event_bus
    ):
        """Should retry on the next advance rather than on a timer."""
        failures = recorder(event_bus, QueueRefillFailed)
        fake_api.responses = [
            make_tracks("A", "B", "C", "D", "E"),
            network_failure(),
            make_tracks("F", "G", "H"),
        ]
        await track_queue.fill()

        for _ in range(3):
            track_queue.advance()
        await tasks.wait()

        assert ids(track_queue) == ["D", "E"]
        assert len(fake_api.discover_calls) == 2
        assert len(failures) == 1
        assert failures[0].queue_length == 2

        await settle(50)
        assert len(fake_api.discover_calls) == 2

        track_queue.advance()
        await tasks.wait()

        assert ids(track_queue) == ["E", "F", "G", "H"]
        assert len(fake_api.discover_calls) == 3

    async def test_unexpected_error_is_contained(self, track_queue, fake_api, tasks):
        fake_api.responses = [RuntimeError("boom")]

        added = await track_queue.fill()

        assert added == 0
        assert len(track_queue) == 0
        assert track_queue.is_refilling is False

    async def test_empty_result_marks_exhausted(self, track_queue, fake_api, tasks, event_bus):
        """An empty batch is an empty state, not an error."""
        exhausted = recorder(event_bus, QueueExhausted)
        fake_api.responses = [[]]

        added = await track_queue.fill()
        await tasks.wait()

        assert added == 0
        assert track_queue.is_exhausted is True
        assert len(exhausted) == 1

    async def test_draining_to_empty_publishes_exhausted(
        self, track_queue, fake_api, tasks, event_bus
    ):
        exhausted = recorder(event_bus, QueueExhausted)
        fake_api.responses = [make_tracks("A")]
        await track_queue.fill()

        track_queue.advance()
        await tasks.wait()

        assert track_queue.current() is None
        assert track_queue.is_exhausted is True
        assert len(exhausted) == 1


# =============================================================================
# Close
# =============================================================================


class TestClose:
    """Closing cancels the pending refill and ignores late results."""

    async def test_close_discards_pending_refill(self, track_queue, fake_api, tasks):
        fake_api.responses = [make_tracks("A", "B", "C")]
        fake_api.gate = asyncio.Event()
        fill = asyncio.create_task(track_queue.fill())
        await settle()

        await track_queue.close()
        fake_api.gate.set()
        await tasks.wait()

        assert await fill == 0
        assert len(track_queue) == 0
        assert track_queue.closed is True

    async def test_closed_queue_ignores_advance_and_refill(self, track_queue, fake_api):
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E")]
        await track_queue.fill()
        await track_queue.close()

        track_queue.advance()

        assert ids(track_queue) == ["A", "B", "C", "D", "E"]
        assert track_queue.request_refill() is False
        assert len(fake_api.discover_calls) == 1

    async def test_close_is_idempotent(self, track_queue):
        await track_queue.close()
        await track_queue.close()

        assert track_queue.closed is True


# =============================================================================
# Phases
# =============================================================================


class TestQueuePhase:
    async def test_phase_progression(self, track_queue, fake_api, tasks):
        fake_api.responses = [make_tracks("A", "B", "C", "D", "E"), make_tracks("F", "G", "H")]
        assert track_queue.phase is QueuePhase.FILLING

        await track_queue.fill()
        assert track_queue.phase is QueuePhase.READY

        for _ in range(3):
            track_queue.advance()
        assert track_queue.phase is QueuePhase.DRAINING
        assert track_queue.is_refilling is True

        await tasks.wait()
        assert track_queue.phase is QueuePhase.READY

    async def test_partial_first_fill_stays_filling(self, track_queue, fake_api):
        fake_api.responses = [make_tracks("A", "B", "C")]

        await track_queue.fill()

        assert track_queue.phase is QueuePhase.FILLING


# =============================================================================
# Invariants
# =============================================================================


class TestQueueInvariants:
    @pytest.mark.parametrize("seed", [1, 7, 42])
    async def test_bounded_and_unique_under_random_consumption(
        self, track_queue, fake_api, tasks, seed
    ):
        """Length stays within capacity and ids stay unique whatever the service sends."""
        rng = random.Random(seed)
        catalogue = [f"T{n}" for n in range(12)]
        fake_api.responses = [
            make_tracks(*rng.choices(catalogue, k=rng.randint(0, 6))) for _ in range(80)
        ]
        fake_api.responses.insert(0, make_tracks(*catalogue[:5]))
        await track_queue.fill()

        for _ in range(60):
            track_queue.advance()
            if rng.random() < 0.5:
                await tasks.wait()

            held = ids(track_queue)
            assert len(held) <= track_queue.capacity
            assert len(held) == len(set(held))

        await tasks.wait()
        held = ids(track_queue)
        assert len(held) <= track_queue.capacity
        assert len(held) == len(set(held))
