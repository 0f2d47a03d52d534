"""Price resolution for (vehicle type, service type) pairs."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ...data.account_store import AccountStore
from ...errors import ConflictError, NotFoundError, ValidationError
from ...models.domain import PricingRule, Provider, ServiceType, VehicleType
from ...schemas.pricing import PriceQuote
from ..parsing import parse_service_type, parse_vehicle_type

logger = logging.getLogger(__name__)

ESTIMATE_MESSAGE = "Estimated Base Price"
PREMIUM_MESSAGE = "Premium workshop pricing applied"
STANDARD_MESSAGE = "Standard workshop pricing applied"


def price_for(rule: PricingRule, provider: Provider) -> Decimal:
    """Base amount plus the premium surcharge when the workshop is premium."""
    if provider.is_premium:
        return rule.base_amount + rule.premium_amount
    return rule.base_amount


def check_provider_support(provider: Provider, vehicle_type: VehicleType, service_type: ServiceType) -> None:
    """Require the workshop to offer the service for exactly this vehicle type."""
    if service_type not in provider.services:
        logger.error(f"Workshop {provider.username} does not offer service type {service_type.value}")
        raise ConflictError("Workshop does not support this service")
    if provider.vehicle_type != vehicle_type:
        logger.error(f"Workshop {provider.username} does not support vehicle type {vehicle_type.value}")
        raise ConflictError("Workshop does not support this vehicle type")


class PricingResolver:
    def __init__(self, store: AccountStore) -> None:
        self.store = store

    def get_rule(self, vehicle_type: VehicleType, service_type: ServiceType) -> PricingRule:
        rule = self.store.find_pricing_rule(vehicle_type, service_type)
        if rule is None:
            logger.error(
                f"Pricing rule not defined for vehicle type {vehicle_type.value} "
                f"and service type {service_type.value}"
            )
            raise NotFoundError(
                f"Pricing rule not defined for vehicle type {vehicle_type.value} "
                f"and service type {service_type.value}"
            )
        return rule

    def quote(
        self,
        vehicle_type: Optional[str | VehicleType],
        service_type: Optional[str | ServiceType],
        provider_id: Optional[str] = None,
    ) -> PriceQuote:
        logger.info(
            f"Price request received | vehicle={vehicle_type} service={service_type} workshopId={provider_id}"
        )
        if vehicle_type is None or service_type is None:
            raise ValidationError("Vehicle type and service type are required")

        vt = parse_vehicle_type(vehicle_type)
        st = parse_service_type(service_type)
        rule = self.get_rule(vt, st)

        if provider_id is None:
            logger.info("Returning estimated price")
            return PriceQuote(
                vehicle_type=vt.value,
                service_type=st.value,
                base_amount=rule.base_amount,
                premium_amount=rule.premium_amount,
                final_amount=rule.base_amount,
                premium_applied=False,
                estimate=True,
                message=ESTIMATE_MESSAGE,
            )

        provider = self.store.find_provider_by_id(provider_id)
        if provider is None:
            logger.error(f"Workshop not found for workshopId {provider_id}")
            raise NotFoundError(f"Workshop not found for workshopId {provider_id}")
        check_provider_support(provider, vt, st)

        premium_amount = rule.premium_amount if provider.is_premium else Decimal("0")
        final_amount = price_for(rule, provider)
        logger.info(
            f"Final price calculated | base={rule.base_amount} premium={premium_amount} final={final_amount}"
        )
        return PriceQuote(
            vehicle_type=vt.value,
            service_type=st.value,
            provider_id=provider.id,
            base_amount=rule.base_amount,
            premium_amount=premium_amount,
            final_amount=final_amount,
            premium_applied=provider.is_premium,
            estimate=False,
            message=PREMIUM_MESSAGE if provider.is_premium else STANDARD_MESSAGE,
        )
