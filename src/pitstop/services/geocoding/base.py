"""Base classes for geocoding provider implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...models.domain import Coordinate


@dataclass(slots=True, frozen=True)
class GeocodedLocation:
    """A forward geocoding hit: where the text points and how the vendor spells it."""

    coordinate: Coordinate
    display_name: Optional[str] = None


class ReverseGeocodingProvider(ABC):
    """Contract for coordinate -> address text lookups."""

    name: str = "reverse"

    @abstractmethod
    def reverse(self, coordinate: Coordinate) -> Optional[str]:
        """Return the display name, or None when the payload has none.

        Transport and non-2xx failures are raised as ``httpx.HTTPError``.
        """
        raise NotImplementedError


class ForwardGeocodingProvider(ABC):
    """Contract for address text -> coordinate lookups."""

    name: str = "forward"

    @abstractmethod
    def geocode(self, address_text: str) -> Optional[GeocodedLocation]:
        """Return the best match, or None when the vendor found nothing.

        Transport and non-2xx failures are raised as ``httpx.HTTPError``.
        """
        raise NotImplementedError
