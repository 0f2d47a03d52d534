"""Workshop status schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .addresses import AddressResponse


class ProviderStatusResponse(BaseModel):
    provider_id: str
    name: Optional[str] = None
    username: str
    status: str
    address: Optional[AddressResponse] = None
