"""Supabase-backed account store.

Customers and workshops live in separate tables; addresses are embedded as
JSON so a whole address book is written with a single upsert.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import (
    Address,
    Coordinate,
    Customer,
    PricingRule,
    Provider,
    ServiceType,
    VehicleType,
    WorkshopStatus,
)

logger = logging.getLogger(__name__)

Account = Union[Customer, Provider]


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def address_to_record(address: Address) -> dict[str, Any]:
    coordinate = address.coordinate
    return {
        "id": address.id,
        "latitude": coordinate.latitude if coordinate else None,
        "longitude": coordinate.longitude if coordinate else None,
        "formatted_address": address.formatted_address,
        "is_default": address.is_default,
    }


def address_from_record(row: dict[str, Any]) -> Address:
    coordinate = None
    if row.get("latitude") is not None and row.get("longitude") is not None:
        coordinate = Coordinate(latitude=float(row["latitude"]), longitude=float(row["longitude"]))
    return Address(
        id=str(row["id"]),
        formatted_address=row.get("formatted_address") or "",
        coordinate=coordinate,
        is_default=bool(row.get("is_default", False)),
    )


def _account_fields(row: dict[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "id": str(row["id"]),
        "username": row["username"],
        "name": row.get("name"),
        "email": row.get("email"),
        "last_modified_at": _parse_datetime(row.get("last_modified_at")),
    }
    created_at = _parse_datetime(row.get("created_at"))
    if created_at is not None:
        fields["created_at"] = created_at
    return fields


def customer_from_record(row: dict[str, Any]) -> Customer:
    return Customer(
        **_account_fields(row),
        addresses=[address_from_record(item) for item in row.get("addresses") or []],
    )


def provider_from_record(row: dict[str, Any]) -> Provider:
    address_row = row.get("address")
    vehicle_type = row.get("vehicle_type")
    return Provider(
        **_account_fields(row),
        address=address_from_record(address_row) if address_row else None,
        status=WorkshopStatus(row.get("status") or WorkshopStatus.CLOSED.value),
        vehicle_type=VehicleType(vehicle_type) if vehicle_type else None,
        services=[ServiceType(item) for item in row.get("services") or []],
        is_premium=bool(row.get("is_premium", False)),
    )


def pricing_rule_from_record(row: dict[str, Any]) -> PricingRule:
    return PricingRule(
        id=str(row["id"]) if row.get("id") is not None else None,
        vehicle_type=VehicleType(row["vehicle_type"]),
        service_type=ServiceType(row["service_type"]),
        base_amount=Decimal(str(row["amount"])),
        premium_amount=Decimal(str(row.get("premium_amount") or 0)),
    )


def account_to_record(account: Account) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": account.id,
        "username": account.username,
        "name": account.name,
        "email": account.email,
        "created_at": account.created_at.isoformat(),
        "last_modified_at": account.last_modified_at.isoformat() if account.last_modified_at else None,
    }
    if isinstance(account, Provider):
        record.update(
            {
                "address": address_to_record(account.address) if account.address else None,
                "status": account.status.value,
                "vehicle_type": account.vehicle_type.value if account.vehicle_type else None,
                "services": [service.value for service in account.services],
                "is_premium": account.is_premium,
            }
        )
    else:
        record["addresses"] = [address_to_record(address) for address in account.addresses]
    return record


class SupabaseAccountStore:
    def __init__(self, client: Any | None = None) -> None:
        self.client = client or get_supabase_client()
        if self.client is None:
            raise ValueError("Supabase is not configured.")
        self.customers_table = settings.customers_table
        self.providers_table = settings.providers_table
        self.pricing_rules_table = settings.pricing_rules_table

    def _first(self, table: str, column: str, value: Any) -> Optional[dict[str, Any]]:
        response = self.client.table(table).select("*").eq(column, value).limit(1).execute()
        rows = response.data or []
        return rows[0] if rows else None

    def find_account_by_username(self, username: str) -> Optional[Account]:
        row = self._first(self.customers_table, "username", username)
        if row is not None:
            return customer_from_record(row)
        row = self._first(self.providers_table, "username", username)
        if row is not None:
            return provider_from_record(row)
        return None

    def find_provider_by_id(self, provider_id: str) -> Optional[Provider]:
        row = self._first(self.providers_table, "id", provider_id)
        return provider_from_record(row) if row is not None else None

    def save_account(self, account: Account) -> None:
        table = self.providers_table if isinstance(account, Provider) else self.customers_table
        self.client.table(table).upsert(account_to_record(account)).execute()
        logger.debug(f"Saved account {account.username} to '{table}'")

    def find_all_providers(self) -> list[Provider]:
        response = self.client.table(self.providers_table).select("*").execute()
        providers: list[Provider] = []
        for row in response.data or []:
            try:
                providers.append(provider_from_record(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid workshop row {row.get('id')}: {e}")
                continue
        return providers

    def find_pricing_rule(self, vehicle_type: VehicleType, service_type: ServiceType) -> Optional[PricingRule]:
        response = (
            self.client.table(self.pricing_rules_table)
            .select("*")
            .eq("vehicle_type", vehicle_type.value)
            .eq("service_type", service_type.value)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return pricing_rule_from_record(rows[0]) if rows else None

    def find_pricing_rules_by_vehicle_type_in(self, vehicle_types: Iterable[VehicleType]) -> list[PricingRule]:
        values = [vehicle_type.value for vehicle_type in vehicle_types]
        response = self.client.table(self.pricing_rules_table).select("*").in_("vehicle_type", values).execute()
        return [pricing_rule_from_record(row) for row in response.data or []]
