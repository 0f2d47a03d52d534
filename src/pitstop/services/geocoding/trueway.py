"""Forward geocoding against the TrueWay Geocoding API (RapidAPI)."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate
from .base import ForwardGeocodingProvider, GeocodedLocation

logger = logging.getLogger(__name__)


class TrueWayForwardGeocoder(ForwardGeocodingProvider):
    name = "trueway"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        api_host: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url or settings.trueway_url
        self.api_key = api_key if api_key is not None else settings.trueway_api_key
        self.api_host = api_host or settings.trueway_api_host
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout))

    def _headers(self) -> dict[str, str]:
        headers = {"x-rapidapi-host": self.api_host}
        if self.api_key:
            headers["x-rapidapi-key"] = self.api_key
        return headers

    def geocode(self, address_text: str) -> Optional[GeocodedLocation]:
        client = self._client or self._get_client()
        try:
            response = client.get(self.base_url, params={"address": address_text}, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        finally:
            if self._client is None:
                client.close()

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            return None

        first = results[0]
        location = first["location"]
        logger.debug(f"TrueWay returned {len(results)} result(s) for '{address_text}'")
        return GeocodedLocation(
            coordinate=Coordinate(latitude=float(location["lat"]), longitude=float(location["lng"])),
            display_name=first.get("address"),
        )
