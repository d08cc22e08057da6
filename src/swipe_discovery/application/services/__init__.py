"""Application services for a discovery session."""

from swipe_discovery.application.services.background import BackgroundTasks
from swipe_discovery.application.services.preference_store import PreferenceStore
from swipe_discovery.application.services.session_controller import DiscoverySessionController
from swipe_discovery.application.services.track_queue import TrackQueueManager

__all__ = [
    "BackgroundTasks",
    "DiscoverySessionController",
    "PreferenceStore",
    "TrackQueueManager",
]
