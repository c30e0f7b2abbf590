"""
Travel time providers backed by the Google Directions API
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from commuteopt.core.errors import (
    CommuteError,
    ConfigError,
    GovernorDeniedError,
    ProviderError,
    ProviderErrorKind,
)
from commuteopt.core.models import TrafficModel

from .models import DirectionsResult

SERVER_CONFIG_ERROR = "Server configuration error"


class TravelTimeProvider(ABC):
    """Predicts travel time for an address pair at a departure time"""

    @abstractmethod
    async def get_duration(
        self,
        origin: str,
        destination: str,
        departure_time: datetime,
        traffic_model: TrafficModel,
    ) -> int:
        """
        Get predicted travel time in seconds

        Raises:
            ProviderError: If the provider cannot produce a travel time
        """


class GoogleDirectionsClient(TravelTimeProvider):
    """
    Async client for the Google Directions API
    Uses driving travel times with the requested traffic model
    """

    def __init__(self, api_key: Optional[str] = None, timeout: int = 30):
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        self.base_url = "https://maps.googleapis.com/maps/api/directions/json"
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        if not self.api_key:
            raise ConfigError("Google API key required. Set GOOGLE_API_KEY")

    async def get_directions(
        self,
        origin: str,
        destination: str,
        departure_time: datetime,
        traffic_model: Optional[TrafficModel] = None,
    ) -> DirectionsResult:
        """
        Fetch the travel time for one departure

        Args:
            origin: Origin address
            destination: Destination address
            departure_time: Departure time; naive values are local time
            traffic_model: Traffic model, best_guess if None

        Returns:
            DirectionsResult for the first leg of the first route

        Raises:
            ProviderError: If Google answers with a non-OK status or no route
            httpx.HTTPError: If Google cannot be reached
        """
        params = {
            "origin": origin,
            "destination": destination,
            "departure_time": int(departure_time.timestamp()),
            "traffic_model": (traffic_model or TrafficModel.BEST_GUESS).value,
            "key": self.api_key,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()

        return self._parse_directions(data)

    def _parse_directions(self, data: Dict[str, Any]) -> DirectionsResult:
        status = data.get("status")
        if status != "OK":
            raise ProviderError.from_status(status, data.get("error_message") or "No route found")

        routes = data.get("routes") or []
        legs = routes[0].get("legs") if routes else None
        if not legs:
            raise ProviderError("No route found", kind=ProviderErrorKind.NO_ROUTE)

        leg = legs[0]
        in_traffic = leg.get("duration_in_traffic") or {}
        duration = leg.get("duration") or {}
        distance = leg.get("distance") or {}

        return DirectionsResult(
            duration=in_traffic.get("value") or duration.get("value"),
            duration_text=in_traffic.get("text") or duration.get("text"),
            distance=distance.get("value"),
            distance_text=distance.get("text"),
        )

    async def get_duration(
        self,
        origin: str,
        destination: str,
        departure_time: datetime,
        traffic_model: TrafficModel,
    ) -> int:
        try:
            result = await self.get_directions(origin, destination, departure_time, traffic_model)
        except httpx.HTTPError as e:
            self.logger.error(f"HTTP error fetching directions: {e}")
            raise ProviderError(f"Failed to fetch directions: {e}") from e
        return result.duration


class ProxyDirectionsClient(TravelTimeProvider):
    """
    Client for the commuteopt directions proxy
    Keeps the Google API key on the server side
    """

    def __init__(self, base_url: Optional[str] = None, timeout: int = 30):
        self.base_url = (base_url or os.getenv("COMMUTEOPT_PROXY_URL") or "http://localhost:8000").rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    async def get_duration(
        self,
        origin: str,
        destination: str,
        departure_time: datetime,
        traffic_model: TrafficModel,
    ) -> int:
        payload = {
            "origin": origin,
            "destination": destination,
            "departureTime": departure_time.astimezone().isoformat(),
            "trafficModel": traffic_model.value,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/api/directions", json=payload)
        except httpx.HTTPError as e:
            self.logger.error(f"HTTP error calling directions proxy: {e}")
            raise ProviderError(f"Could not reach directions proxy: {e}") from e

        if response.status_code == 200:
            return int(response.json()["duration"])

        raise self._error_from_response(response)

    def _error_from_response(self, response: httpx.Response) -> CommuteError:
        """Map a proxy error response onto the error taxonomy"""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("error") or "Failed to fetch directions"

        if response.status_code == 429:
            retry_after = body.get("retryAfter") or response.headers.get("Retry-After")
            return GovernorDeniedError(message, retry_after=int(retry_after) if retry_after else None)

        if response.status_code == 500 and message == SERVER_CONFIG_ERROR:
            return ConfigError(message)

        if response.status_code == 400:
            match = re.match(r"Google API error: (\w+)", message)
            if match:
                return ProviderError.from_status(match.group(1), body.get("details"))
            if message == "No route found":
                return ProviderError(message, kind=ProviderErrorKind.NO_ROUTE)

        return ProviderError(message)
