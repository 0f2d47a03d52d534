"""Service wiring for the enclosing request-handling layer."""

from __future__ import annotations

from dataclasses import dataclass

from .data.account_store import AccountStore
from .data.supabase_store import SupabaseAccountStore
from .services.addresses import AddressBook
from .services.discovery import DiscoveryEngine
from .services.geocoding import (
    ForwardGeocodingProvider,
    GeocodingResolver,
    ReverseGeocodingProvider,
)
from .services.pricing import PricingResolver
from .services.providers import ProviderCapabilities


@dataclass(slots=True)
class PitstopServices:
    store: AccountStore
    geocoder: GeocodingResolver
    addresses: AddressBook
    pricing: PricingResolver
    discovery: DiscoveryEngine
    providers: ProviderCapabilities


def create_services(
    store: AccountStore | None = None,
    reverse_provider: ReverseGeocodingProvider | None = None,
    forward_provider: ForwardGeocodingProvider | None = None,
) -> PitstopServices:
    """Build the core services; unspecified collaborators come from settings."""
    store = store if store is not None else SupabaseAccountStore()
    geocoder = GeocodingResolver(reverse_provider=reverse_provider, forward_provider=forward_provider)
    pricing = PricingResolver(store)
    return PitstopServices(
        store=store,
        geocoder=geocoder,
        addresses=AddressBook(store, geocoder),
        pricing=pricing,
        discovery=DiscoveryEngine(store, pricing),
        providers=ProviderCapabilities(store),
    )
