"""Workshop discovery: filter by status, capability and distance, then rank and price."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from ...data.account_store import AccountStore
from ...errors import DiscoveryError, ValidationError
from ...models.domain import (
    Coordinate,
    Customer,
    PricingRule,
    Provider,
    ServiceType,
    VehicleType,
    WorkshopStatus,
)
from ...schemas.discovery import DiscoveryRequest, DiscoveryResult
from ..addresses import default_address
from ..geospatial import distance_between
from ..parsing import parse_service_type, parse_vehicle_type
from ..pricing.service import PricingResolver, price_for

logger = logging.getLogger(__name__)


def _skip_reason(
    provider: Provider,
    vehicle_type: VehicleType,
    service_type: ServiceType,
) -> Optional[str]:
    """Return why a workshop is ineligible, checking predicates in a fixed order."""
    if provider.status is not WorkshopStatus.OPEN:
        return f"status = {provider.status.value}"
    if provider.coordinate is None:
        return "no address set"
    supported = provider.vehicle_type
    if supported is not VehicleType.BOTH and supported is not vehicle_type:
        return f"supports {supported.value if supported else None}, not {vehicle_type.value}"
    if service_type not in provider.services:
        return f"does not offer {service_type.value}"
    return None


class DiscoveryEngine:
    def __init__(self, store: AccountStore, pricing: PricingResolver | None = None) -> None:
        self.store = store
        self.pricing = pricing or PricingResolver(store)

    def _result(
        self,
        provider: Provider,
        distance_km: float,
        service_type: ServiceType,
        rule: PricingRule,
    ) -> DiscoveryResult:
        address = provider.address
        coordinate = provider.coordinate
        return DiscoveryResult(
            provider_id=provider.id,
            display_name=provider.display_name,
            distance_km=distance_km,
            vehicle_type=provider.vehicle_type.value,
            service_type=service_type.value,
            formatted_address=address.formatted_address,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            price=price_for(rule, provider),
        )

    def _search(self, customer: Customer, request: DiscoveryRequest) -> list[DiscoveryResult]:
        origin: Coordinate | None = default_address(customer).coordinate
        if origin is None:
            raise ValidationError("Address required before searching workshops")
        logger.info(f"Using default address at ({origin.latitude}, {origin.longitude}) for {customer.username}")

        vehicle_type = parse_vehicle_type(request.vehicle_type)
        service_type = parse_service_type(request.service_type)
        logger.info(f"Filtering workshops for vehicleType={vehicle_type.value} and serviceType={service_type.value}")

        rule = self.pricing.get_rule(vehicle_type, service_type)

        providers = self.store.find_all_providers()
        logger.info(f"Total workshops found: {len(providers)}")

        results: list[DiscoveryResult] = []
        for provider in providers:
            reason = _skip_reason(provider, vehicle_type, service_type)
            if reason is not None:
                logger.debug(f"Workshop {provider.username} skipped: {reason}")
                continue

            distance_km = distance_between(origin, provider.coordinate)
            if distance_km > request.max_distance_km:
                logger.debug(f"Workshop {provider.username} skipped: {distance_km:.2f} km away")
                continue

            results.append(self._result(provider, distance_km, service_type, rule))

        return sorted(results, key=lambda result: result.distance_km)

    def discover(
        self,
        customer: Customer,
        request: Union[DiscoveryRequest, Mapping[str, Any]],
    ) -> list[DiscoveryResult]:
        """Return eligible workshops nearest first.

        Any failure, including invalid input, is reported as ``DiscoveryError``
        chained to the original exception.
        """
        try:
            if not isinstance(request, DiscoveryRequest):
                request = DiscoveryRequest.model_validate(request)
            results = self._search(customer, request)
        except Exception as exc:
            logger.exception(f"Error while searching workshops: {exc}")
            raise DiscoveryError("Failed to search workshops.") from exc

        logger.info(f"Workshop search completed, {len(results)} results found")
        return results

    def list_available_service_types(self, vehicle_type: str | VehicleType) -> list[ServiceType]:
        """Service types priced for this vehicle type or for BOTH, in first-seen order."""
        requested = parse_vehicle_type(vehicle_type)
        logger.info(f"Fetching available services for vehicle type : {requested.value}")

        search_types = [VehicleType.BOTH]
        if requested is not VehicleType.BOTH:
            search_types.append(requested)

        rules = self.store.find_pricing_rules_by_vehicle_type_in(search_types)
        if not rules:
            logger.warning(f"No pricing rule found for vehicle type : {requested.value} (including BOTH)")
            return []

        services = list(dict.fromkeys(rule.service_type for rule in rules))
        logger.info(f"Returning {len(services)} available service(s) for vehicle type: {requested.value}")
        return services
