import random
from decimal import Decimal
from typing import Optional

import pytest

from pitstop.data.account_store import InMemoryAccountStore
from pitstop.errors import DiscoveryError, NotFoundError, ValidationError
from pitstop.models.domain import (
    Address,
    Coordinate,
    Customer,
    PricingRule,
    Provider,
    ServiceType,
    VehicleType,
    WorkshopStatus,
)
from pitstop.schemas.discovery import DiscoveryRequest
from pitstop.services.discovery import DiscoveryEngine
from pitstop.services.geospatial import haversine_km

HOME = (22.60, 88.40)


def _customer(lat: float = HOME[0], lon: float = HOME[1]) -> Customer:
    return Customer(
        id="C1",
        username="filter_test_user",
        addresses=[Address(id="123", formatted_address="Kolkata", coordinate=Coordinate(lat, lon), is_default=True)],
    )


def _provider(
    username: str,
    lat: Optional[float],
    lon: Optional[float],
    vehicle_type: Optional[VehicleType] = VehicleType.TWO_WHEELER,
    services=(ServiceType.OIL_CHANGE,),
    status: WorkshopStatus = WorkshopStatus.OPEN,
    premium: bool = False,
    name: Optional[str] = None,
) -> Provider:
    address = None
    if lat is not None:
        address = Address(id=f"addr-{username}", formatted_address=f"Near {username}", coordinate=Coordinate(lat, lon), is_default=True)
    return Provider(
        id=f"id-{username}",
        username=username,
        name=name,
        address=address,
        status=status,
        vehicle_type=vehicle_type,
        services=list(services),
        is_premium=premium,
    )


def _rules() -> list[PricingRule]:
    return [
        PricingRule(VehicleType.TWO_WHEELER, ServiceType.OIL_CHANGE, Decimal("100"), Decimal("50")),
        PricingRule(VehicleType.TWO_WHEELER, ServiceType.AC_REPAIR, Decimal("300"), Decimal("75")),
        PricingRule(VehicleType.FOUR_WHEELER, ServiceType.OIL_CHANGE, Decimal("400"), Decimal("100")),
    ]


def _engine(providers) -> DiscoveryEngine:
    return DiscoveryEngine(InMemoryAccountStore(accounts=providers, pricing_rules=_rules()))


def _kolkata_workshops() -> list[Provider]:
    return [
        _provider("workshop1", 22.6020, 88.4020),
        _provider("workshop2", 22.6500, 88.4500, services=(ServiceType.TYRE_REPLACEMENT,)),
        _provider("workshop3", 22.8000, 88.3600),
    ]


def test_nearby_workshop_is_found():
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5.0)

    results = _engine(_kolkata_workshops()).discover(_customer(), request)

    assert [r.display_name for r in results] == ["workshop1"]
    result = results[0]
    assert result.distance_km == pytest.approx(0.30, abs=0.05)
    assert result.provider_id == "id-workshop1"
    assert result.vehicle_type == "TWO_WHEELER"
    assert result.service_type == "OIL_CHANGE"
    assert result.formatted_address == "Near workshop1"
    assert (result.latitude, result.longitude) == (22.6020, 88.4020)
    assert result.price == Decimal("100")


def test_far_workshop_is_excluded():
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=1)

    results = _engine(_kolkata_workshops()).discover(_customer(), request)

    assert "workshop3" not in [r.display_name for r in results]


def test_service_nobody_offers_returns_empty_list():
    request = {"vehicle_type": "two_wheeler", "service_type": "ac_repair", "max_distance_km": 5}

    assert _engine(_kolkata_workshops()).discover(_customer(), request) == []


def test_results_are_sorted_and_ties_keep_scan_order():
    providers = [
        _provider("far", 22.62, 88.42),
        _provider("tie_a", 22.61, 88.41),
        _provider("near", 22.601, 88.401),
        _provider("tie_b", 22.61, 88.41),
    ]
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=50)

    results = _engine(providers).discover(_customer(), request)

    assert [r.display_name for r in results] == ["near", "tie_a", "tie_b", "far"]
    distances = [r.distance_km for r in results]
    assert distances == sorted(distances)


def test_both_workshop_matches_and_reports_its_own_type():
    providers = [_provider("both", 22.601, 88.401, vehicle_type=VehicleType.BOTH, premium=True)]
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    results = _engine(providers).discover(_customer(), request)

    assert len(results) == 1
    assert results[0].vehicle_type == "BOTH"
    assert results[0].price == Decimal("150")


def test_display_name_prefers_non_blank_name():
    providers = [
        _provider("named", 22.601, 88.401, name="Speedy Motors"),
        _provider("blank", 22.602, 88.402, name="   "),
    ]
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    results = _engine(providers).discover(_customer(), request)

    assert [r.display_name for r in results] == ["Speedy Motors", "blank"]


def test_closed_unlocated_and_unconfigured_workshops_are_skipped():
    providers = [
        _provider("closed", 22.601, 88.401, status=WorkshopStatus.CLOSED),
        _provider("homeless", None, None),
        _provider("no_vehicle", 22.601, 88.401, vehicle_type=None),
        _provider("four", 22.601, 88.401, vehicle_type=VehicleType.FOUR_WHEELER),
        _provider("ok", 22.601, 88.401),
    ]
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    results = _engine(providers).discover(_customer(), request)

    assert [r.display_name for r in results] == ["ok"]


def test_uses_default_address_as_reference_point():
    customer = _customer()
    customer.addresses[0].is_default = False
    customer.addresses.append(
        Address(id="far-home", formatted_address="Siliguri", coordinate=Coordinate(26.72, 88.43), is_default=True)
    )
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    assert _engine(_kolkata_workshops()).discover(customer, request) == []


def test_eligibility_matches_every_predicate():
    rng = random.Random(20240607)
    vehicle_choices = [VehicleType.TWO_WHEELER, VehicleType.FOUR_WHEELER, VehicleType.BOTH, None]
    service_choices = [ServiceType.OIL_CHANGE, ServiceType.AC_REPAIR, ServiceType.TYRE_REPLACEMENT]
    providers = []
    for i in range(200):
        located = rng.random() > 0.1
        providers.append(
            _provider(
                f"w{i}",
                HOME[0] + rng.uniform(-0.1, 0.1) if located else None,
                HOME[1] + rng.uniform(-0.1, 0.1) if located else None,
                vehicle_type=rng.choice(vehicle_choices),
                services=rng.sample(service_choices, rng.randint(0, 3)),
                status=rng.choice([WorkshopStatus.OPEN, WorkshopStatus.CLOSED]),
                premium=rng.random() > 0.5,
            )
        )
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=7.5)

    results = _engine(providers).discover(_customer(), request)

    expected = {
        p.username
        for p in providers
        if p.status is WorkshopStatus.OPEN
        and p.coordinate is not None
        and p.vehicle_type in (VehicleType.TWO_WHEELER, VehicleType.BOTH)
        and ServiceType.OIL_CHANGE in p.services
        and haversine_km(*HOME, p.coordinate.latitude, p.coordinate.longitude) <= 7.5
    }
    assert {r.display_name for r in results} == expected
    assert all(r.distance_km <= 7.5 for r in results)
    assert [r.distance_km for r in results] == sorted(r.distance_km for r in results)
    by_name = {p.username: p for p in providers}
    for result in results:
        assert result.price == (Decimal("150") if by_name[result.display_name].is_premium else Decimal("100"))


def test_missing_rule_fails_the_whole_search():
    request = DiscoveryRequest(vehicle_type="FOUR_WHEELER", service_type="AC_REPAIR", max_distance_km=5)

    with pytest.raises(DiscoveryError, match="Failed to search workshops.") as excinfo:
        _engine(_kolkata_workshops()).discover(_customer(), request)

    assert isinstance(excinfo.value.__cause__, NotFoundError)


def test_customer_without_address_cannot_search():
    customer = Customer(id="C2", username="nomad")
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    with pytest.raises(DiscoveryError) as excinfo:
        _engine(_kolkata_workshops()).discover(customer, request)

    assert isinstance(excinfo.value.__cause__, ValidationError)
    assert "Address required" in str(excinfo.value.__cause__)


@pytest.mark.parametrize(
    "payload",
    [
        {"vehicle_type": "SPACESHIP", "service_type": "OIL_CHANGE", "max_distance_km": 5},
        {"vehicle_type": "TWO_WHEELER", "service_type": "OIL_CHANGE", "max_distance_km": 0},
    ],
)
def test_invalid_requests_are_wrapped(payload):
    with pytest.raises(DiscoveryError):
        _engine(_kolkata_workshops()).discover(_customer(), payload)


def test_available_services_include_both_rules():
    store = InMemoryAccountStore(
        pricing_rules=[
            PricingRule(VehicleType.BOTH, ServiceType.OIL_CHANGE, Decimal("100")),
            PricingRule(VehicleType.TWO_WHEELER, ServiceType.TYRE_REPLACEMENT, Decimal("200")),
            PricingRule(VehicleType.FOUR_WHEELER, ServiceType.AC_REPAIR, Decimal("900")),
        ]
    )
    engine = DiscoveryEngine(store)

    assert engine.list_available_service_types("two_wheeler") == [ServiceType.OIL_CHANGE, ServiceType.TYRE_REPLACEMENT]
    assert engine.list_available_service_types(VehicleType.FOUR_WHEELER) == [ServiceType.OIL_CHANGE, ServiceType.AC_REPAIR]


def test_available_services_are_distinct(monkeypatch):
    store = InMemoryAccountStore()
    duplicate = PricingRule(VehicleType.BOTH, ServiceType.OIL_CHANGE, Decimal("100"))
    monkeypatch.setattr(store, "find_pricing_rules_by_vehicle_type_in", lambda types: [duplicate, duplicate])

    assert DiscoveryEngine(store).list_available_service_types("TWO_WHEELER") == [ServiceType.OIL_CHANGE]


def test_available_services_empty_when_no_rules():
    assert DiscoveryEngine(InMemoryAccountStore()).list_available_service_types("FOUR_WHEELER") == []


def test_available_services_rejects_unknown_vehicle_type():
    with pytest.raises(ValidationError):
        DiscoveryEngine(InMemoryAccountStore()).list_available_service_types("tractor")


def test_workshop_address_without_coordinate_is_skipped():
    unlocated = _provider("unlocated", None, None)
    unlocated.address = Address(id="addr-unlocated", formatted_address="Address not found", coordinate=None, is_default=True)
    providers = [unlocated, _provider("located", 22.601, 88.401)]
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    results = _engine(providers).discover(_customer(), request)

    assert [r.display_name for r in results] == ["located"]


def test_customer_default_address_without_coordinate_cannot_search():
    customer = Customer(
        id="C3",
        username="textonly",
        addresses=[Address(id="t1", formatted_address="Somewhere", coordinate=None, is_default=True)],
    )
    request = DiscoveryRequest(vehicle_type="TWO_WHEELER", service_type="OIL_CHANGE", max_distance_km=5)

    with pytest.raises(DiscoveryError) as excinfo:
        _engine(_kolkata_workshops()).discover(customer, request)

    assert isinstance(excinfo.value.__cause__, ValidationError)
    assert "Address required" in str(excinfo.value.__cause__)
