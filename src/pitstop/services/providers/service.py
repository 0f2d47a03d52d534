"""Workshop-side management of offered services, vehicle type and status."""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from ...data.account_store import AccountStore
from ...errors import ConflictError, NotFoundError
from ...models.domain import Provider, ServiceType, VehicleType, WorkshopStatus
from ...schemas.addresses import AddressResponse
from ...schemas.providers import ProviderStatusResponse
from ..accounts import AccountLocks, account_locks, reload_account, sync_account
from ..parsing import parse_service_type, parse_vehicle_type

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderCapabilities:
    def __init__(self, store: AccountStore, locks: AccountLocks | None = None) -> None:
        self.store = store
        self.locks = locks if locks is not None else account_locks

    def _update(self, provider: Provider, change: Callable[[Provider], T]) -> T:
        """Apply ``change`` to the stored workshop and save it.

        The caller's object only reflects the change after a successful save.
        """
        with self.locks.hold(provider.id):
            current = reload_account(self.store, provider)
            result = change(current)
            current.touch()
            self.store.save_account(current)
            sync_account(provider, current)
        return result

    def add_service_type(self, provider: Provider, service_type: str | ServiceType) -> list[ServiceType]:
        service = parse_service_type(service_type)

        def add(current: Provider) -> list[ServiceType]:
            if service in current.services:
                logger.warning(f"Workshop Service Type {service.value} already exists for workshop {current.username}")
                raise ConflictError("Workshop Service Type already exists")
            current.services.append(service)
            return list(current.services)

        services = self._update(provider, add)
        logger.info(f"Added Workshop Service Type {service.value} for {provider.username}")
        return services

    def delete_service_type(self, provider: Provider, service_type: str | ServiceType) -> list[ServiceType]:
        service = parse_service_type(service_type)

        def remove(current: Provider) -> list[ServiceType]:
            if service not in current.services:
                logger.warning(f"Workshop {current.username} does not currently offer service {service.value}")
                raise NotFoundError("Workshop does not offer this service")
            current.services.remove(service)
            return list(current.services)

        services = self._update(provider, remove)
        logger.info(f"Removed service {service.value} from workshop {provider.username}")
        return services

    def list_service_types(self, provider: Provider) -> list[ServiceType]:
        return list(provider.services)

    def set_vehicle_type(self, provider: Provider, vehicle_type: str | VehicleType) -> VehicleType:
        requested = parse_vehicle_type(vehicle_type)

        def assign(current: Provider) -> VehicleType:
            if current.vehicle_type is requested:
                logger.warning(f"Vehicle type {requested.value} already exists for workshop {current.username}")
                raise ConflictError("Vehicle Type already exists")
            current.vehicle_type = requested
            return requested

        self._update(provider, assign)
        logger.info(f"Workshop {provider.username} now supports {requested.value}")
        return requested

    def delete_vehicle_type(self, provider: Provider) -> None:
        def clear(current: Provider) -> None:
            if current.vehicle_type is None:
                logger.warning(f"Workshop [{current.username}] has no vehicle type configured")
                raise NotFoundError("No vehicle type configured")
            current.vehicle_type = None

        self._update(provider, clear)
        logger.info(f"Vehicle type removed for workshop [{provider.username}]")

    def get_vehicle_type(self, provider: Provider) -> Optional[VehicleType]:
        return provider.vehicle_type

    def _set_status(self, provider: Provider, status: WorkshopStatus) -> ProviderStatusResponse:
        logger.info(f"Setting workshop {provider.username} to {status.value}")

        def apply(current: Provider) -> None:
            current.status = status

        self._update(provider, apply)
        return self.get_status(provider)

    def open_provider(self, provider: Provider) -> ProviderStatusResponse:
        return self._set_status(provider, WorkshopStatus.OPEN)

    def close_provider(self, provider: Provider) -> ProviderStatusResponse:
        return self._set_status(provider, WorkshopStatus.CLOSED)

    def get_status(self, provider: Provider) -> ProviderStatusResponse:
        return ProviderStatusResponse(
            provider_id=provider.id,
            name=provider.name,
            username=provider.username,
            status=provider.status.value,
            address=AddressResponse.from_address(provider.address) if provider.address else None,
        )
