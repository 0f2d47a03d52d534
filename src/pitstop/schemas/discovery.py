"""Discovery request/response schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from ..config import settings


class DiscoveryRequest(BaseModel):
    vehicle_type: str = Field(..., description="Vehicle type name, case-insensitive (e.g. 'two_wheeler').")
    service_type: str = Field(..., description="Service type name, case-insensitive (e.g. 'OIL_CHANGE').")
    max_distance_km: float = Field(
        default_factory=lambda: settings.default_search_radius_km,
        gt=0,
        description="Search radius around the customer's default address.",
    )


class DiscoveryResult(BaseModel):
    provider_id: str
    display_name: str
    distance_km: float = Field(..., ge=0)
    vehicle_type: str
    service_type: str
    formatted_address: str
    latitude: float
    longitude: float
    price: Decimal
