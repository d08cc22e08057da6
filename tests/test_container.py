"""
Unit Tests for Dependency Injection Container

Tests for:
- Lazy initialization (properties create instances on first access)
- Caching (subsequent property access returns same instance)
- Injected adapters replacing the defaults
- Settings flowing into services
- Shutdown ordering and grace period
"""

import asyncio

import pytest
from fakes import FakeDiscoveryAPI, GatedAnimator, RecordingHaptics, make_tracks

from swipe_discovery.application.interfaces.haptics import NullHaptics
from swipe_discovery.config.container import Container, create_container
from swipe_discovery.config.settings import QueueSettings, SessionSettings, Settings
from swipe_discovery.infrastructure.animation.frame_animator import FrameAnimator
from swipe_discovery.infrastructure.api.http_client import HttpDiscoveryClient


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        queue=QueueSettings(capacity=4, low_water_mark=1),
        session=SessionSettings(shutdown_grace_seconds=0.05),
    )


@pytest.fixture
def fake_api():
    return FakeDiscoveryAPI()


@pytest.fixture
def container(settings, fake_api):
    return create_container(
        settings,
        discovery_api=fake_api,
        animator=GatedAnimator(),
        haptics=RecordingHaptics(),
    )


class TestLazyInitialization:
    """Tests for lazy, cached construction."""

    def test_default_adapters(self, settings):
        container = Container(settings=settings)

        assert isinstance(container.discovery_api, HttpDiscoveryClient)
        assert isinstance(container.animator, FrameAnimator)
        assert isinstance(container.haptics, NullHaptics)

    def test_properties_are_cached(self, container):
        assert container.session_controller is container.session_controller
        assert container.track_queue is container.track_queue
        assert container.preference_store is container.preference_store
        assert container.event_bus is container.event_bus

    def test_injected_adapters_are_used(self, container, fake_api):
        assert container.discovery_api is fake_api

    def test_queue_settings_applied(self, container):
        assert container.track_queue.capacity == 4
        assert container.track_queue.low_water_mark == 1

    def test_gesture_settings_applied(self, settings):
        container = Container(settings=settings)

        assert container.gesture_interpreter.velocity_floor == settings.gesture.velocity_floor

    def test_nothing_built_before_access(self, settings):
        container = Container(settings=settings)

        assert container._session_controller is None
        assert container._discovery_api is None

    def test_create_container_uses_cached_settings(self, monkeypatch, settings):
        monkeypatch.setattr("swipe_discovery.config.settings.get_settings", lambda: settings)

        assert create_container().settings is settings


class TestShutdown:
    """Tests for Container.shutdown."""

    async def test_shutdown_unmounts_and_closes_client(self, container, fake_api):
        fake_api.responses = [make_tracks("A", "B")]
        await container.session_controller.mount()

        await container.shutdown()

        assert container.session_controller.mounted is False
        assert container.track_queue.closed is True
        assert fake_api.closed is True

    async def test_shutdown_cancels_stuck_pushes_after_grace(self, container, fake_api):
        """Pushes still running after the grace period are cancelled."""
        gate = asyncio.Event()

        async def hang(preferences):
            await gate.wait()

        fake_api.update_weights = hang
        container.preference_store.update({"energy": 0.9})

        await container.shutdown()

        assert container.background_tasks.pending == 0
        assert fake_api.closed is True

    async def test_shutdown_without_anything_built(self, settings):
        container = Container(settings=settings)

        await container.shutdown()
