"""Preference Vector Store - single writer for taste weights and discovery settings."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ...domain.discovery.entities import DiscoverySettings, PreferenceVector
from ...domain.discovery.value_objects import FEATURE_NAMES
from ...domain.shared.events import PreferencesChanged
from ...domain.shared.exceptions import NetworkFailure
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.discovery.entities import UserMusicProfile
    from ...domain.shared.events import EventBus
    from ..interfaces.discovery_api import DiscoveryAPI
    from .background import BackgroundTasks

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Holds the in-memory preference vector and discovery settings.

    Updates are optimistic: local state changes immediately and the push to
    the service runs in the background. A failed push is logged and the
    local value is kept, so the service converges on the next successful push.
    """

    def __init__(
        self,
        *,
        api: DiscoveryAPI,
        tasks: BackgroundTasks,
        event_bus: EventBus | None = None,
        initial: PreferenceVector | None = None,
        settings: DiscoverySettings | None = None,
    ) -> None:
        self._api = api
        self._tasks = tasks
        self._bus = event_bus
        self._vector = initial or PreferenceVector()
        self._settings = settings or DiscoverySettings()

    @property
    def vector(self) -> PreferenceVector:
        return self._vector

    @property
    def settings(self) -> DiscoverySettings:
        return self._settings

    def update(self, partial: Mapping[str, float]) -> PreferenceVector:
        """Merge *partial* into the vector, clamp to [0, 1] and push in the background."""
        merged = self._vector.merged(partial)
        self._vector = merged
        logger.info(LogTemplates.PREFERENCES_UPDATED, dict(partial))

        self._tasks.spawn(self._push_weights(merged), name="push-weights")
        if self._bus is not None:
            self._tasks.spawn(
                self._bus.publish(PreferencesChanged(weights=merged.as_dict())),
                name="publish-preferences",
            )
        return merged

    def update_settings(self, **changes: Any) -> DiscoverySettings:
        """Apply settings *changes*; only remote-owned fields are pushed."""
        updated = self._settings.with_changes(**changes)
        self._settings = updated
        logger.info(LogTemplates.SETTINGS_UPDATED, changes)

        if updated.touches_remote(changes):
            self._tasks.spawn(self._push_settings(updated), name="push-settings")
        return updated

    def rehydrate(self, profile: UserMusicProfile) -> None:
        """Replace local state with the profile loaded on mount."""
        known = {
            name: weight
            for name, weight in profile.custom_weights.items()
            if name in FEATURE_NAMES and math.isfinite(weight)
        }
        self._vector = PreferenceVector().merged(known)
        self._settings = self._settings.with_changes(
            adaptive_learning=profile.adaptive_learning,
            exploration_factor=profile.exploration_factor,
            diversity_boost=profile.diversity_boost,
        )
        logger.info(LogTemplates.PREFERENCES_REHYDRATED, profile.total_feedback_received)

    async def _push_weights(self, vector: PreferenceVector) -> None:
        try:
            await self._api.update_weights(vector)
        except NetworkFailure as exc:
            logger.warning(LogTemplates.PREFERENCES_PUSH_FAILED, exc.message)
        except Exception as exc:
            logger.warning(LogTemplates.PREFERENCES_PUSH_FAILED, exc)

    async def _push_settings(self, settings: DiscoverySettings) -> None:
        try:
            await self._api.update_preferences(settings)
        except NetworkFailure as exc:
            logger.warning(LogTemplates.SETTINGS_PUSH_FAILED, exc.message)
        except Exception as exc:
            logger.warning(LogTemplates.SETTINGS_PUSH_FAILED, exc)
