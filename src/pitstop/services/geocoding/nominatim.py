"""Reverse geocoding against a Nominatim-compatible endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate
from .base import ReverseGeocodingProvider

logger = logging.getLogger(__name__)


class NominatimReverseGeocoder(ReverseGeocodingProvider):
    name = "nominatim"

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url or settings.nominatim_url
        self.user_agent = user_agent or settings.nominatim_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout))

    def reverse(self, coordinate: Coordinate) -> Optional[str]:
        params = {
            "lat": f"{coordinate.latitude:f}",
            "lon": f"{coordinate.longitude:f}",
            "format": "json",
            "addressdetails": "1",
        }
        headers = {"User-Agent": self.user_agent}

        client = self._client or self._get_client()
        try:
            response = client.get(self.base_url, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        finally:
            if self._client is None:
                client.close()

        if not isinstance(data, dict):
            return None
        display_name = data.get("display_name")
        if not display_name or not isinstance(data.get("address"), dict):
            logger.debug(f"Nominatim payload for {coordinate} has no display_name/address")
            return None
        return str(display_name)
