"""Factory for geocoding providers based on configuration."""

from __future__ import annotations

from typing import Any

from ...config import settings
from .base import ForwardGeocodingProvider, ReverseGeocodingProvider
from .nominatim import NominatimReverseGeocoder
from .trueway import TrueWayForwardGeocoder


def get_reverse_provider(name: str | None = None, **kwargs: Any) -> ReverseGeocodingProvider:
    match (name or settings.reverse_geocoder).strip().lower():
        case "nominatim":
            return NominatimReverseGeocoder(**kwargs)
        case other:
            raise ValueError(f"Unknown reverse geocoding provider '{other}'.")


def get_forward_provider(name: str | None = None, **kwargs: Any) -> ForwardGeocodingProvider:
    match (name or settings.forward_geocoder).strip().lower():
        case "trueway":
            return TrueWayForwardGeocoder(**kwargs)
        case other:
            raise ValueError(f"Unknown forward geocoding provider '{other}'.")
