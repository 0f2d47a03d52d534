"""Geocoding providers and resolver."""

from .base import ForwardGeocodingProvider, GeocodedLocation, ReverseGeocodingProvider
from .dispatcher import get_forward_provider, get_reverse_provider
from .nominatim import NominatimReverseGeocoder
from .resolver import ADDRESS_NOT_FOUND, ForwardGeocodeResult, GeocodingResolver, ReverseGeocodeResult
from .trueway import TrueWayForwardGeocoder

__all__ = [
    "ADDRESS_NOT_FOUND",
    "ForwardGeocodeResult",
    "ForwardGeocodingProvider",
    "GeocodedLocation",
    "GeocodingResolver",
    "NominatimReverseGeocoder",
    "ReverseGeocodeResult",
    "ReverseGeocodingProvider",
    "TrueWayForwardGeocoder",
    "get_forward_provider",
    "get_reverse_provider",
]
