"""Pricing request/response schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PriceQuote(BaseModel):
    vehicle_type: str
    service_type: str
    provider_id: Optional[str] = None
    base_amount: Decimal
    premium_amount: Decimal
    final_amount: Decimal
    premium_applied: bool
    estimate: bool
    message: str
