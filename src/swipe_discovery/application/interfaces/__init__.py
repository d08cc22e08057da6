"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from swipe_discovery.application.interfaces.animator import Animator
from swipe_discovery.application.interfaces.discovery_api import DiscoveryAPI
from swipe_discovery.application.interfaces.haptics import HapticEngine

__all__ = [
    "Animator",
    "DiscoveryAPI",
    "HapticEngine",
]
