import pytest

from ride_booking.core.exceptions import InvalidAmountError
from ride_booking.models.user import VehicleKind
from ride_booking.services import fare_policy

from conftest import RATES


def test_fare_is_distance_times_kind_rate():
    assert fare_policy.calculate_fare(VehicleKind.CAR, 10, RATES) == 120.0
    assert fare_policy.calculate_fare(VehicleKind.BIKE, 3.5, RATES) == 24.5
    assert fare_policy.calculate_fare(VehicleKind.CNG, 2.333, RATES) == 21.0


def test_rate_lookup_accepts_plain_values():
    assert fare_policy.rate_for("cng", RATES) == 9.0


def test_default_rates_come_from_settings():
    rates = fare_policy.default_rates()
    assert set(rates) == set(VehicleKind)
    assert all(rate > 0 for rate in rates.values())


def test_non_positive_distance_is_rejected():
    with pytest.raises(InvalidAmountError):
        fare_policy.calculate_fare(VehicleKind.CAR, 0, RATES)


def test_surge_scales_quotes_only_upwards():
    assert fare_policy.apply_surge(100.0, 1.0) == 100.0
    assert fare_policy.apply_surge(100.0, 1.5) == 150.0
    with pytest.raises(InvalidAmountError):
        fare_policy.apply_surge(100.0, 0.9)


def test_system_quote_applies_surge(system):
    system.set_surge_multiplier(1.5)
    assert system.quote(VehicleKind.CAR, 10) == 180.0
