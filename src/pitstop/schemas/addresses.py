"""Address book request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Address


class AddressRequest(BaseModel):
    """Either a coordinate pair or free text; coordinates win when both are sent."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = Field(default=None, description="Free-text address to geocode.")

    @model_validator(mode="after")
    def _require_location(self) -> "AddressRequest":
        if self.has_coordinates:
            return self
        if self.formatted_address is not None and self.formatted_address.strip():
            return self
        raise ValueError("Invalid address data")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AddressResponse(BaseModel):
    id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: str
    is_default: bool

    @classmethod
    def from_address(cls, address: Address) -> "AddressResponse":
        coordinate = address.coordinate
        return cls(
            id=address.id,
            latitude=coordinate.latitude if coordinate else None,
            longitude=coordinate.longitude if coordinate else None,
            formatted_address=address.formatted_address,
            is_default=address.is_default,
        )


class ProviderAddressResponse(BaseModel):
    has_address: bool
    address: Optional[AddressResponse] = None
