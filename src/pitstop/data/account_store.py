"""Account store contract and an in-memory implementation."""

from __future__ import annotations

import copy
import threading
from typing import Iterable, Optional, Protocol, Sequence, Union

from ..models.domain import Customer, PricingRule, Provider, ServiceType, VehicleType

Account = Union[Customer, Provider]


class AccountStore(Protocol):
    """Read/write access to accounts, workshops and pricing rules."""

    def find_account_by_username(self, username: str) -> Optional[Account]: ...

    def find_provider_by_id(self, provider_id: str) -> Optional[Provider]: ...

    def save_account(self, account: Account) -> None: ...

    def find_all_providers(self) -> Sequence[Provider]: ...

    def find_pricing_rule(self, vehicle_type: VehicleType, service_type: ServiceType) -> Optional[PricingRule]: ...

    def find_pricing_rules_by_vehicle_type_in(self, vehicle_types: Iterable[VehicleType]) -> Sequence[PricingRule]: ...


class InMemoryAccountStore:
    """Process-local store; reads and writes are isolated copies."""

    def __init__(
        self,
        accounts: Iterable[Account] = (),
        pricing_rules: Iterable[PricingRule] = (),
    ) -> None:
        self._lock = threading.RLock()
        self._accounts: dict[str, Account] = {}
        self._rules: dict[tuple[VehicleType, ServiceType], PricingRule] = {}
        for account in accounts:
            self._put(account)
        for rule in pricing_rules:
            self.add_pricing_rule(rule)

    def _put(self, account: Account) -> None:
        self._accounts[account.id] = copy.deepcopy(account)

    def add_pricing_rule(self, rule: PricingRule) -> None:
        key = (rule.vehicle_type, rule.service_type)
        with self._lock:
            if key in self._rules:
                raise ValueError(
                    f"Pricing rule already defined for vehicle type {rule.vehicle_type.value} "
                    f"and service type {rule.service_type.value}"
                )
            self._rules[key] = rule

    def find_account_by_username(self, username: str) -> Optional[Account]:
        with self._lock:
            for account in self._accounts.values():
                if account.username == username:
                    return copy.deepcopy(account)
        return None

    def find_provider_by_id(self, provider_id: str) -> Optional[Provider]:
        with self._lock:
            account = self._accounts.get(provider_id)
            if isinstance(account, Provider):
                return copy.deepcopy(account)
        return None

    def save_account(self, account: Account) -> None:
        with self._lock:
            self._put(account)

    def find_all_providers(self) -> list[Provider]:
        with self._lock:
            return [copy.deepcopy(a) for a in self._accounts.values() if isinstance(a, Provider)]

    def find_pricing_rule(self, vehicle_type: VehicleType, service_type: ServiceType) -> Optional[PricingRule]:
        with self._lock:
            return self._rules.get((vehicle_type, service_type))

    def find_pricing_rules_by_vehicle_type_in(self, vehicle_types: Iterable[VehicleType]) -> list[PricingRule]:
        wanted = set(vehicle_types)
        with self._lock:
            return [rule for rule in self._rules.values() if rule.vehicle_type in wanted]
