"""Parsing of user-supplied vehicle and service type names."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import ValidationError
from ..models.domain import ServiceType, VehicleType

logger = logging.getLogger(__name__)


def parse_vehicle_type(value: Optional[str | VehicleType]) -> VehicleType:
    if isinstance(value, VehicleType):
        return value
    try:
        return VehicleType[str(value).strip().upper()]
    except KeyError:
        logger.error(f"Invalid vehicle type: {value}")
        raise ValidationError(f"Invalid vehicle type: {value}") from None


def parse_service_type(value: Optional[str | ServiceType]) -> ServiceType:
    if isinstance(value, ServiceType):
        return value
    try:
        return ServiceType[str(value).strip().upper()]
    except KeyError:
        logger.error(f"Invalid service type: {value}")
        raise ValidationError(f"Invalid service type: {value}") from None
