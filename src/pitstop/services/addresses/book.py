"""Saved addresses for customers and workshops.

A customer keeps an ordered list with at most one default entry; a workshop
keeps a single address that is always its default. Mutations of one account
are serialized so the read-modify-write of the default flag stays atomic.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from ...data.account_store import AccountStore
from ...errors import ConflictError, NotFoundError, ValidationError
from ...models.domain import Address, Coordinate, Customer, Provider
from ...schemas.addresses import AddressRequest, AddressResponse, ProviderAddressResponse
from ..accounts import AccountLocks, account_locks, reload_account, sync_account
from ..geocoding import GeocodingResolver

logger = logging.getLogger(__name__)


def _coerce_request(payload: Union[AddressRequest, Mapping[str, Any]]) -> AddressRequest:
    if isinstance(payload, AddressRequest):
        return payload
    try:
        return AddressRequest.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid address data") from exc


def default_address(customer: Customer) -> Address:
    """Return the default address, falling back to the first stored entry."""
    addresses = customer.addresses
    if not addresses:
        logger.error("Address required before searching workshops")
        raise ValidationError("Address required before searching workshops")
    defaults = [address for address in addresses if address.is_default]
    if len(defaults) == 1:
        return defaults[0]
    return addresses[0]


class AddressBook:
    def __init__(
        self,
        store: AccountStore,
        geocoder: GeocodingResolver,
        locks: AccountLocks | None = None,
    ) -> None:
        self.store = store
        self.geocoder = geocoder
        self.locks = locks if locks is not None else account_locks

    def _resolve(self, payload: Union[AddressRequest, Mapping[str, Any]]) -> Address:
        request = _coerce_request(payload)
        if request.has_coordinates:
            coordinate = Coordinate(latitude=request.latitude, longitude=request.longitude)
            formatted = self.geocoder.resolve_address(coordinate).formatted_address
        else:
            resolved = self.geocoder.resolve_coordinate(request.formatted_address.strip())
            coordinate = resolved.coordinate
            formatted = resolved.formatted_address
        return Address(id=str(uuid.uuid4()), formatted_address=formatted, coordinate=coordinate)

    def add_address(self, customer: Customer, payload: Union[AddressRequest, Mapping[str, Any]]) -> Address:
        address = self._resolve(payload)

        with self.locks.hold(customer.id):
            current = reload_account(self.store, customer)
            wanted = address.formatted_address.casefold()
            if any(existing.formatted_address.casefold() == wanted for existing in current.addresses):
                logger.warning(f"Address '{address.formatted_address}' already saved for {customer.username}")
                raise ConflictError("Address already exists")

            address.is_default = not current.addresses
            current.addresses.append(address)
            current.touch()
            self.store.save_account(current)
            sync_account(customer, current)

        logger.info(f"Added address {address.id} for {customer.username} (default={address.is_default})")
        return address

    def set_default(self, customer: Customer, address_id: str) -> Address:
        with self.locks.hold(customer.id):
            current = reload_account(self.store, customer)
            if not current.addresses:
                raise ConflictError("No addresses found")

            target = next((a for a in current.addresses if a.id == address_id), None)
            if target is None:
                raise NotFoundError("Address not found")

            for address in current.addresses:
                address.is_default = address is target
            current.touch()
            self.store.save_account(current)
            sync_account(customer, current)

        logger.info(f"Default address for {customer.username} set to {address_id}")
        return target

    def get_default(self, customer: Customer) -> Address:
        return default_address(customer)

    def list_addresses(self, customer: Customer) -> list[AddressResponse]:
        return [AddressResponse.from_address(address) for address in customer.addresses]

    def set_provider_address(
        self, provider: Provider, payload: Union[AddressRequest, Mapping[str, Any]]
    ) -> Address:
        address = self._resolve(payload)
        address.is_default = True

        with self.locks.hold(provider.id):
            current = reload_account(self.store, provider)
            current.address = address
            current.touch()
            self.store.save_account(current)
            sync_account(provider, current)

        logger.info(f"Workshop {provider.username} located at '{address.formatted_address}'")
        return address

    def get_provider_address(self, provider: Provider) -> ProviderAddressResponse:
        if provider.address is None:
            return ProviderAddressResponse(has_address=False)
        return ProviderAddressResponse(has_address=True, address=AddressResponse.from_address(provider.address))
