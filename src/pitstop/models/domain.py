"""Domain models for accounts, workshops, addresses and pricing rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VehicleType(str, Enum):
    TWO_WHEELER = "TWO_WHEELER"
    FOUR_WHEELER = "FOUR_WHEELER"
    BOTH = "BOTH"


class ServiceType(str, Enum):
    OIL_CHANGE = "OIL_CHANGE"
    TYRE_REPLACEMENT = "TYRE_REPLACEMENT"
    AC_REPAIR = "AC_REPAIR"
    GENERAL_SERVICE = "GENERAL_SERVICE"
    BRAKE_REPAIR = "BRAKE_REPAIR"
    BATTERY_REPLACEMENT = "BATTERY_REPLACEMENT"
    ENGINE_REPAIR = "ENGINE_REPAIR"
    WASHING = "WASHING"


class WorkshopStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(slots=True, frozen=True)
class Coordinate:
    """WGS-84 point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(slots=True)
class Address:
    """A saved location owned by exactly one account."""

    id: str
    formatted_address: str
    coordinate: Optional[Coordinate] = None
    is_default: bool = False


@dataclass(slots=True)
class Account:
    """Fields shared by customers and workshops."""

    id: str
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    last_modified_at: Optional[datetime] = None

    def touch(self) -> None:
        self.last_modified_at = utcnow()

    @property
    def display_name(self) -> str:
        if self.name and self.name.strip():
            return self.name
        return self.username


@dataclass(slots=True)
class Customer(Account):
    """An account searching for workshops; keeps an ordered address list."""

    addresses: list[Address] = field(default_factory=list)


@dataclass(slots=True)
class Provider(Account):
    """A workshop account with a service location and capabilities."""

    address: Optional[Address] = None
    status: WorkshopStatus = WorkshopStatus.CLOSED
    vehicle_type: Optional[VehicleType] = None
    services: list[ServiceType] = field(default_factory=list)
    is_premium: bool = False

    @property
    def coordinate(self) -> Optional[Coordinate]:
        return self.address.coordinate if self.address else None


@dataclass(slots=True, frozen=True)
class PricingRule:
    """Reference price for one (vehicle type, service type) pair."""

    vehicle_type: VehicleType
    service_type: ServiceType
    base_amount: Decimal
    premium_amount: Decimal = Decimal("0")
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.base_amount < 0 or self.premium_amount < 0:
            raise ValueError("Pricing amounts must be non-negative.")
