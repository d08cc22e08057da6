"""httpx-based client for the music-preferences REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from swipe_discovery.application.interfaces.discovery_api import DiscoveryAPI
from swipe_discovery.config.settings import ApiSettings
from swipe_discovery.domain.discovery.entities import (
    DiscoverBatch,
    DiscoverySettings,
    PreferenceVector,
    UserMusicProfile,
)
from swipe_discovery.domain.discovery.value_objects import TrackId
from swipe_discovery.domain.shared.exceptions import NetworkFailure
from swipe_discovery.domain.shared.messages import ErrorMessages, LogTemplates
from swipe_discovery.infrastructure.api.models import (
    DiscoverResponse,
    ProfilePayload,
    discover_body,
    feedback_body,
    settings_body,
)

logger = logging.getLogger(__name__)

DISCOVER_PATH = "/music-preferences/discover"
FEEDBACK_PATH = "/music-preferences/feedback"
PREFERENCES_PATH = "/music-preferences/preferences"
WEIGHTS_PATH = "/music-preferences/weights"
SETTINGS_PATH = "/music-preferences/settings"


class HttpDiscoveryClient(DiscoveryAPI):
    """Talks to the discovery service over HTTP.

    Every failure (transport error, timeout, HTTP status >= 400, missing or
    malformed payload) surfaces as ``NetworkFailure``. Nothing is retried here;
    callers decide what a failure means.
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ApiSettings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client

        headers = {"Accept": "application/json"}
        token = self._settings.token.get_secret_value()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url,
            headers=headers,
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        )
        logger.info(
            LogTemplates.HTTP_CLIENT_INITIALIZED,
            self._settings.base_url,
            self._settings.timeout_seconds,
        )
        return self._client

    async def _request(
        self, operation: str, method: str, path: str, body: dict[str, Any] | None = None
    ) -> Any:
        client = self._get_client()
        logger.debug(LogTemplates.HTTP_REQUEST, method, path)
        try:
            response = await client.request(method, path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(LogTemplates.HTTP_REQUEST_FAILED, method, path, status)
            raise NetworkFailure(
                operation,
                ErrorMessages.HTTP_STATUS_ERROR.format(operation=operation, status=status),
                status=status,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.HTTP_REQUEST_FAILED, method, path, e.__class__.__name__)
            raise NetworkFailure(
                operation,
                ErrorMessages.HTTP_TRANSPORT_ERROR.format(operation=operation, error=e),
            ) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailure(
                operation,
                ErrorMessages.HTTP_TRANSPORT_ERROR.format(operation=operation, error=e),
            ) from e

    @staticmethod
    def _unwrap(operation: str, payload: Any) -> dict[str, Any]:
        """Strip the ``{"data": ...}`` envelope(s) the service wraps responses in."""
        data = payload.get("data") if isinstance(payload, dict) else None
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        if not isinstance(data, dict):
            raise NetworkFailure(
                operation, ErrorMessages.EMPTY_API_RESPONSE.format(operation=operation)
            )
        return data

    async def discover(self, preferences: PreferenceVector, count: int) -> DiscoverBatch:
        payload = await self._request(
            "discover",
            "POST",
            DISCOVER_PATH,
            discover_body(preferences, count, self._settings.strategy),
        )
        data = self._unwrap("discover", payload)
        try:
            return DiscoverResponse.model_validate(data).to_domain()
        except PydanticValidationError as e:
            raise NetworkFailure("discover", str(e)) from e

    async def submit_feedback(self, track_id: TrackId, rating: float, label: str) -> None:
        await self._request(
            "submit_feedback", "POST", FEEDBACK_PATH, feedback_body(track_id.value, rating, label)
        )

    async def update_preferences(self, settings: DiscoverySettings) -> None:
        await self._request("update_preferences", "PUT", PREFERENCES_PATH, settings_body(settings))

    async def update_weights(self, preferences: PreferenceVector) -> None:
        await self._request("update_weights", "PUT", WEIGHTS_PATH, preferences.as_dict())

    async def get_settings(self) -> UserMusicProfile:
        payload = await self._request("get_settings", "GET", SETTINGS_PATH)
        data = self._unwrap("get_settings", payload)
        try:
            return ProfilePayload.model_validate(data).to_domain()
        except PydanticValidationError as e:
            raise NetworkFailure("get_settings", str(e)) from e

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
