"""Dependency Injection Container

Manages the discovery session's dependency graph, providing lazy
initialization and lifecycle management for services and adapters.
Components are created on-demand and cached for reuse.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.animator import Animator
    from ..application.interfaces.discovery_api import DiscoveryAPI
    from ..application.interfaces.haptics import HapticEngine
    from ..application.services.background import BackgroundTasks
    from ..application.services.preference_store import PreferenceStore
    from ..application.services.session_controller import DiscoverySessionController
    from ..application.services.track_queue import TrackQueueManager
    from ..domain.discovery.gesture import GestureInterpreter
    from ..domain.shared.events import EventBus
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Adapters (API client, animator, haptics) can be supplied up front to
    replace the defaults, which is how tests and alternative front-ends plug
    in. Everything else is built lazily from ``settings``.
    """

    settings: Settings

    # Infrastructure adapters
    _discovery_api: DiscoveryAPI | None = None
    _animator: Animator | None = None
    _haptics: HapticEngine | None = None

    # Cross-cutting
    _event_bus: EventBus | None = None
    _background_tasks: BackgroundTasks | None = None

    # Domain services
    _gesture_interpreter: GestureInterpreter | None = None

    # Application services
    _preference_store: PreferenceStore | None = None
    _track_queue: TrackQueueManager | None = None
    _session_controller: DiscoverySessionController | None = None

    # === Cross-cutting ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def background_tasks(self) -> BackgroundTasks:
        if self._background_tasks is None:
            from ..application.services.background import BackgroundTasks

            self._background_tasks = BackgroundTasks()
        return self._background_tasks

    # === Infrastructure ===

    @property
    def discovery_api(self) -> DiscoveryAPI:
        """Get the remote discovery service client."""
        if self._discovery_api is None:
            from ..infrastructure.api.http_client import HttpDiscoveryClient

            self._discovery_api = HttpDiscoveryClient(self.settings.api)
        return self._discovery_api

    @property
    def animator(self) -> Animator:
        if self._animator is None:
            from ..infrastructure.animation.frame_animator import FrameAnimator

            self._animator = FrameAnimator()
        return self._animator

    @property
    def haptics(self) -> HapticEngine:
        if self._haptics is None:
            from ..application.interfaces.haptics import NullHaptics

            self._haptics = NullHaptics()
        return self._haptics

    # === Domain services ===

    @property
    def gesture_interpreter(self) -> GestureInterpreter:
        if self._gesture_interpreter is None:
            from ..domain.discovery.gesture import GestureInterpreter

            gesture = self.settings.gesture
            self._gesture_interpreter = GestureInterpreter(
                commit_ratio=gesture.commit_ratio,
                velocity_floor=gesture.velocity_floor,
                max_rotation_deg=gesture.max_rotation_deg,
                rotation_per_px=gesture.rotation_per_px,
                tap_slop_px=gesture.tap_slop_px,
            )
        return self._gesture_interpreter

    # === Application services ===

    @property
    def preference_store(self) -> PreferenceStore:
        if self._preference_store is None:
            from ..application.services.preference_store import PreferenceStore

            self._preference_store = PreferenceStore(
                api=self.discovery_api,
                tasks=self.background_tasks,
                event_bus=self.event_bus,
            )
        return self._preference_store

    @property
    def track_queue(self) -> TrackQueueManager:
        if self._track_queue is None:
            from ..application.services.track_queue import TrackQueueManager

            self._track_queue = TrackQueueManager(
                api=self.discovery_api,
                preferences=self.preference_store,
                tasks=self.background_tasks,
                event_bus=self.event_bus,
                capacity=self.settings.queue.capacity,
                low_water_mark=self.settings.queue.low_water_mark,
            )
        return self._track_queue

    @property
    def session_controller(self) -> DiscoverySessionController:
        if self._session_controller is None:
            from ..application.services.session_controller import DiscoverySessionController

            session = self.settings.session
            self._session_controller = DiscoverySessionController(
                queue=self.track_queue,
                api=self.discovery_api,
                preferences=self.preference_store,
                interpreter=self.gesture_interpreter,
                animator=self.animator,
                haptics=self.haptics,
                tasks=self.background_tasks,
                event_bus=self.event_bus,
                exit_animation_ms=session.exit_animation_ms,
                reset_animation_ms=session.reset_animation_ms,
                haptic_intensity=session.haptic_intensity,
                card_width=self.settings.gesture.card_width,
            )
        return self._session_controller

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Unmount the session, let in-flight pushes land briefly, then close the client."""
        if self._session_controller is not None:
            await self._session_controller.unmount()

        if self._background_tasks is not None:
            try:
                await asyncio.wait_for(
                    self._background_tasks.wait(),
                    timeout=self.settings.session.shutdown_grace_seconds,
                )
            except TimeoutError:
                await self._background_tasks.cancel_all()

        if self._discovery_api is not None:
            await self._discovery_api.aclose()

        if self._event_bus is not None:
            self._event_bus.clear()

        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(
    settings: Settings | None = None,
    *,
    discovery_api: DiscoveryAPI | None = None,
    animator: Animator | None = None,
    haptics: HapticEngine | None = None,
) -> Container:
    """Create a container, optionally with pre-built adapters."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()

    return Container(
        settings=settings,
        _discovery_api=discovery_api,
        _animator=animator,
        _haptics=haptics,
    )
