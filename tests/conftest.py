from datetime import datetime

import pytest

from ride_booking.models.user import (
    DriverDocument,
    PaymentKind,
    PaymentMethod,
    Vehicle,
    VehicleKind,
    new_admin,
)
from ride_booking.services.system import RideSharingSystem

RATES = {
    VehicleKind.CAR: 12.0,
    VehicleKind.CNG: 9.0,
    VehicleKind.BIKE: 7.0,
}

SCHEDULED = datetime(2024, 5, 1, 9, 30)


def add_driver(system, user_id, kind=VehicleKind.CAR, verified=True):
    driver = system.register_driver(
        user_id=user_id,
        name=f"Driver {user_id}",
        phone="0170000000",
        vehicle=Vehicle(f"V-{user_id}", kind, "Toyota Axio", f"DHA-{user_id}"),
    )
    if verified:
        system.upload_document(user_id, DriverDocument.DRIVING_LICENSE)
        system.upload_document(user_id, DriverDocument.VEHICLE_REGISTRATION)
        system.verify_driver(user_id)
    return driver


@pytest.fixture
def system():
    return RideSharingSystem(
        admin=new_admin("A100", "Admin", "01800000000"),
        rates=RATES,
        default_commission_rate=0.20,
    )


@pytest.fixture
def passenger(system):
    return system.register_passenger(
        "P1", "Tanvir", "01303910166",
        payment_method=PaymentMethod(PaymentKind.CARD, "4111111111111111"),
    )


@pytest.fixture
def driver(system):
    return add_driver(system, "D1")


@pytest.fixture
def ride(system, passenger, driver):
    return system.book("P1", "D1", 10, SCHEDULED, pickup="Mirpur", destination="Uttara")
