"""Address <-> coordinate translation with asymmetric failure handling.

Reverse lookups only produce display text, so failures degrade to a
placeholder string. Forward lookups feed distance computation, so failures
are raised as ``ExternalServiceError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ...errors import ExternalServiceError
from ...models.domain import Coordinate
from .base import ForwardGeocodingProvider, ReverseGeocodingProvider
from .dispatcher import get_forward_provider, get_reverse_provider

ADDRESS_NOT_FOUND = "Address not found"

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ReverseGeocodeResult:
    formatted_address: str
    degraded: bool = False


@dataclass(slots=True, frozen=True)
class ForwardGeocodeResult:
    coordinate: Coordinate
    formatted_address: str


class GeocodingResolver:
    def __init__(
        self,
        reverse_provider: ReverseGeocodingProvider | None = None,
        forward_provider: ForwardGeocodingProvider | None = None,
    ) -> None:
        self.reverse_provider = reverse_provider or get_reverse_provider()
        self.forward_provider = forward_provider or get_forward_provider()

    def resolve_address(self, coordinate: Coordinate) -> ReverseGeocodeResult:
        try:
            display_name = self.reverse_provider.reverse(coordinate)
        except Exception as exc:
            logger.warning(f"Reverse geocoding failed for {coordinate}: {exc}")
            return ReverseGeocodeResult(formatted_address=f"Error fetching address: {exc}", degraded=True)

        if not display_name:
            logger.warning(f"Reverse geocoding returned no address for {coordinate}")
            return ReverseGeocodeResult(formatted_address=ADDRESS_NOT_FOUND, degraded=True)
        return ReverseGeocodeResult(formatted_address=display_name)

    def resolve_coordinate(self, address_text: str) -> ForwardGeocodeResult:
        try:
            location = self.forward_provider.geocode(address_text)
        except httpx.HTTPStatusError as exc:
            response = exc.response
            logger.error(f"Forward geocoding API error {response.status_code} for '{address_text}'")
            raise ExternalServiceError(
                f"Error fetching coordinates for: {address_text} | "
                f"API Error: {response.status_code} - {response.text}",
                address_text=address_text,
            ) from exc
        except Exception as exc:
            logger.error(f"Forward geocoding failed for '{address_text}': {exc}")
            raise ExternalServiceError(
                f"Error fetching coordinates for: {address_text} | {exc}",
                address_text=address_text,
            ) from exc

        if location is None:
            logger.error(f"Forward geocoding found no results for '{address_text}'")
            raise ExternalServiceError(
                f"Error fetching coordinates for: {address_text} | No results found for: {address_text}",
                address_text=address_text,
            )
        return ForwardGeocodeResult(
            coordinate=location.coordinate,
            formatted_address=location.display_name or address_text,
        )
