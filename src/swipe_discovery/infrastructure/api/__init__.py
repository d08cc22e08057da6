"""HTTP adapter for the remote discovery service."""

from swipe_discovery.infrastructure.api.http_client import HttpDiscoveryClient

__all__ = ["HttpDiscoveryClient"]
