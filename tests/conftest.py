"""Shared fixtures for the swipe discovery test suite."""

import pytest
from fakes import FakeDiscoveryAPI, GatedAnimator, RecordingHaptics

from swipe_discovery.application.services.background import BackgroundTasks
from swipe_discovery.application.services.preference_store import PreferenceStore
from swipe_discovery.application.services.session_controller import DiscoverySessionController
from swipe_discovery.application.services.track_queue import TrackQueueManager
from swipe_discovery.domain.discovery.gesture import GestureInterpreter
from swipe_discovery.domain.shared.events import EventBus

# ============================================================================
# Adapter Fixtures
# ============================================================================


@pytest.fixture
def fake_api():
    return FakeDiscoveryAPI()


@pytest.fixture
def animator():
    return GatedAnimator()


@pytest.fixture
def haptics():
    return RecordingHaptics()


@pytest.fixture
def event_bus():
    return EventBus()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def tasks():
    return BackgroundTasks()


@pytest.fixture
def preference_store(fake_api, tasks, event_bus):
    return PreferenceStore(api=fake_api, tasks=tasks, event_bus=event_bus)


@pytest.fixture
def track_queue(fake_api, preference_store, tasks, event_bus):
    return TrackQueueManager(
        api=fake_api,
        preferences=preference_store,
        tasks=tasks,
        event_bus=event_bus,
        capacity=5,
        low_water_mark=2,
    )


@pytest.fixture
def interpreter():
    return GestureInterpreter()


@pytest.fixture
def controller(track_queue, fake_api, preference_store, interpreter, animator, haptics, tasks, event_bus):
    return DiscoverySessionController(
        queue=track_queue,
        api=fake_api,
        preferences=preference_store,
        interpreter=interpreter,
        animator=animator,
        haptics=haptics,
        tasks=tasks,
        event_bus=event_bus,
        card_width=500.0,
    )
