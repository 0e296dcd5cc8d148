"""Tomorrow.io API Client - Imperative Shell.

This module handles HTTP communication with the Tomorrow.io events API.
All I/O is contained here; parsing and filtering are in the core module.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from src.core.config import DEFAULT_BASE_URL, DEFAULT_INSIGHTS


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


@dataclass
class EventsQueryParams:
    """Parameters for the Tomorrow.io events query.

    Attributes:
        location: Location as a "lat,lon" string
        insights: Event categories to include
        buffer: Search buffer around the location, in km (None for API default)
    """
    location: str
    insights: tuple[str, ...] = field(default_factory=lambda: DEFAULT_INSIGHTS)
    buffer: float | None = None


class TomorrowClient:
    """Client for fetching weather events from the Tomorrow.io API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        insights: tuple[str, ...] = DEFAULT_INSIGHTS,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize Tomorrow.io client.

        Args:
            base_url: API base URL
            timeout: Request timeout in seconds
            insights: Event categories requested by fetch_raw_alerts
            session: HTTP session (created if not provided)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.insights = insights
        self.session = session or requests.Session()

    @property
    def events_url(self) -> str:
        """Full URL of the events endpoint."""
        return f"{self.base_url}/events"

    def _build_params(self, query: EventsQueryParams, api_key: str) -> dict[str, str]:
        """Build query parameters for the events request.

        Args:
            query: Query parameters
            api_key: Tomorrow.io API key

        Returns:
            Dict of URL query parameters
        """
        params: dict[str, str] = {
            "location": query.location,
            "apikey": api_key,
        }

        if query.insights:
            params["insights"] = ",".join(query.insights)

        if query.buffer is not None:
            params["buffer"] = str(query.buffer)

        return params

    def fetch_events(self, query: EventsQueryParams, api_key: str) -> dict[str, Any]:
        """Fetch weather events from the Tomorrow.io API.

        This method performs HTTP I/O.

        Args:
            query: Query parameters
            api_key: Tomorrow.io API key

        Returns:
            Raw JSON response (``{"data": {"events": [...]}}``)

        Raises:
            requests.HTTPError: If the API returns an error status
            requests.RequestException: If the request fails
        """
        params = self._build_params(query, api_key)

        logger.info(
            "Fetching weather events from Tomorrow.io for %s",
            query.location,
        )

        response = self.session.get(
            self.events_url,
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        events = []
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            events = data["data"].get("events") or []

        logger.info(
            "Fetched %d weather events from Tomorrow.io",
            len(events),
        )

        return data

    def fetch_raw_alerts(self, location_key: str, api_key: str) -> dict[str, Any]:
        """Fetch raw alert events for a location.

        Convenience method used by the alert pipeline.

        Args:
            location_key: Location as a "lat,lon" string
            api_key: Tomorrow.io API key

        Returns:
            Raw JSON response
        """
        query = EventsQueryParams(
            location=location_key,
            insights=self.insights,
        )
        return self.fetch_events(query, api_key)
