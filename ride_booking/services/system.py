"""
System aggregate: registry, complaint ledger, admin, surge multiplier and
id sequences, with the operations the API layer may call.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from ride_booking.core.config import Settings, settings as default_settings
from ride_booking.core.exceptions import (
    DocumentsMissingError,
    InvalidAmountError,
    InvalidReferenceError,
    RoleMismatchError,
)
from ride_booking.models.complaint import Complaint
from ride_booking.models.ride import Ride, RideStatus
from ride_booking.models.user import (
    DriverDocument,
    PaymentKind,
    PaymentMethod,
    User,
    UserRole,
    Vehicle,
    VehicleKind,
    new_admin,
    new_driver,
    new_passenger,
)
from ride_booking.services import earnings, fare_policy, negotiation, ride_lifecycle
from ride_booking.services.complaints import ComplaintLedger
from ride_booking.services.registry import EntityRegistry
from ride_booking.services.sequence import IdSequence

logger = logging.getLogger(__name__)

class RideSharingSystem:
    """The whole in-memory state of the service."""

    def __init__(
        self,
        admin: User,
        surge_multiplier: float = 1.0,
        ride_id_prefix: str = "RIDE-",
        complaint_id_prefix: str = "CMP-",
        rates: Optional[Dict[VehicleKind, float]] = None,
        default_commission_rate: float = 0.20,
    ):
        if not admin.is_admin:
            raise RoleMismatchError(f"User {admin.user_id} is not an admin")
        self.registry = EntityRegistry()
        self.ride_ids = IdSequence(ride_id_prefix)
        self.complaint_ids = IdSequence(complaint_id_prefix)
        self.complaints = ComplaintLedger(self.complaint_ids)
        self.rates = dict(rates) if rates else fare_policy.default_rates()
        self.default_commission_rate = default_commission_rate
        self.surge_multiplier = 1.0
        self.set_surge_multiplier(surge_multiplier)
        self.admin = self.registry.register_user(admin)

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        admin: Optional[User] = None,
        surge_multiplier: Optional[float] = None,
        seed: Optional[bool] = None,
    ) -> "RideSharingSystem":
        """Create a system configured from settings.

        ``admin`` and ``surge_multiplier`` override the configured ones when
        restoring a snapshot; ``seed`` defaults to ``SEED_DEMO_DATA``.
        """
        config = config or default_settings
        system = cls(
            admin=admin or new_admin(
                config.ADMIN_ID, config.ADMIN_NAME, config.ADMIN_PHONE, config.ADMIN_EMAIL
            ),
            surge_multiplier=(
                config.SURGE_MULTIPLIER if surge_multiplier is None else surge_multiplier
            ),
            ride_id_prefix=config.RIDE_ID_PREFIX,
            complaint_id_prefix=config.COMPLAINT_ID_PREFIX,
            rates=fare_policy.default_rates(config),
            default_commission_rate=config.PLATFORM_COMMISSION_RATE,
        )
        if seed is None:
            seed = config.SEED_DEMO_DATA
        if seed:
            system.seed_demo_data()
        return system

    # ===================== Configuration =====================

    def set_surge_multiplier(self, multiplier: float) -> None:
        if multiplier < 1.0:
            raise InvalidAmountError(f"Surge multiplier must be at least 1.0, got {multiplier}")
        self.surge_multiplier = multiplier

    # ===================== Users =====================

    def register_passenger(
        self,
        user_id: str,
        name: str,
        phone: str,
        email: str = "",
        payment_method: Optional[PaymentMethod] = None,
    ) -> User:
        return self.registry.register_user(
            new_passenger(user_id, name, phone, email, payment_method)
        )

    def register_driver(
        self,
        user_id: str,
        name: str,
        phone: str,
        vehicle: Vehicle,
        email: str = "",
        commission_rate: Optional[float] = None,
    ) -> User:
        rate = self.default_commission_rate if commission_rate is None else commission_rate
        if not 0.0 <= rate <= 1.0:
            raise InvalidAmountError(f"Commission rate must be within [0, 1], got {rate}")
        return self.registry.register_user(
            new_driver(user_id, name, phone, vehicle, rate, email)
        )

    def upload_document(self, driver_id: str, document: DriverDocument) -> User:
        driver = self.registry.resolve(driver_id, UserRole.DRIVER)
        if document == DriverDocument.DRIVING_LICENSE:
            driver.profile.license_uploaded = True
        else:
            driver.profile.registration_uploaded = True
        logger.info(f"Driver {driver_id} uploaded {document.value}")
        return driver

    def verify_driver(self, driver_id: str) -> User:
        driver = self.registry.resolve(driver_id, UserRole.DRIVER)
        if not driver.profile.documents_uploaded:
            raise DocumentsMissingError(f"Driver {driver_id} has not uploaded all documents")
        driver.profile.verified = True
        logger.info(f"Driver verified: {driver_id}")
        return driver

    def set_commission_rate(self, driver_id: str, rate: float) -> User:
        driver = self.registry.resolve(driver_id, UserRole.DRIVER)
        earnings.set_commission_rate(driver, rate)
        return driver

    def get_user(self, user_id: str) -> User:
        return self.registry.get_user(user_id)

    def all_users(self) -> List[User]:
        return self.registry.all_users()

    def users_by_role(self, role: UserRole) -> List[User]:
        return self.registry.users_by_role(role)

    # ===================== Rides =====================

    def book(
        self,
        passenger_id: str,
        driver_id: str,
        distance_km: float,
        scheduled_time: Optional[datetime] = None,
        pickup: str = "",
        destination: str = "",
    ) -> Ride:
        return ride_lifecycle.book_ride(
            self, passenger_id, driver_id, distance_km, scheduled_time, pickup, destination
        )

    def start(self, ride_id: str) -> Ride:
        return ride_lifecycle.start_ride(self, ride_id)

    def end(self, ride_id: str) -> Ride:
        return ride_lifecycle.end_ride(self, ride_id)

    def cancel(self, ride_id: str, reason: Optional[str] = None) -> Ride:
        return ride_lifecycle.cancel_ride(self, ride_id, reason)

    def propose_fare(self, ride_id: str, amount: float, proposed_by: Optional[str] = None) -> Ride:
        return negotiation.propose_fare(self, ride_id, amount, proposed_by)

    def accept_fare(self, ride_id: str) -> Ride:
        return negotiation.accept_fare(self, ride_id)

    def reject_fare(self, ride_id: str) -> Ride:
        return negotiation.reject_fare(self, ride_id)

    def get_ride(self, ride_id: str) -> Ride:
        return self.registry.get_ride(ride_id)

    def all_rides(self) -> List[Ride]:
        return self.registry.all_rides()

    def rides_for_user(self, user_id: str, status: Optional[RideStatus] = None) -> List[Ride]:
        return self.registry.rides_for_user(user_id, status)

    def quote(self, kind: VehicleKind, distance_km: float) -> float:
        """Estimated fare including the current surge multiplier."""
        fare = fare_policy.calculate_fare(kind, distance_km, self.rates)
        return fare_policy.apply_surge(fare, self.surge_multiplier)

    # ===================== Complaints =====================

    def file_complaint(self, reporter_id: str, reported_id: str, details: str) -> Complaint:
        reporter = self.registry.find_user(reporter_id)
        reported = self.registry.find_user(reported_id)
        if reporter is None or reported is None:
            missing = reporter_id if reporter is None else reported_id
            raise InvalidReferenceError(f"No user with id {missing}")
        return self.complaints.file(reporter, reported, details)

    def resolve_complaint(self, complaint_id: str) -> bool:
        return self.complaints.resolve(complaint_id)

    def complaints_against(self, user_id: str) -> List[Complaint]:
        return self.complaints.against(user_id)

    # ===================== Demo data =====================

    def seed_demo_data(self) -> None:
        """Register a few verified drivers and passengers."""
        drivers = [
            ("D100", "Abdur Rahim", "01735537376",
             Vehicle("V100", VehicleKind.CAR, "Toyota Camry", "ABC123", "white")),
            ("D101", "Abdul Karim", "0175550102",
             Vehicle("V101", VehicleKind.CAR, "Honda CR-V", "XYZ789", "black")),
            ("D102", "Suleman", "0175550103",
             Vehicle("V102", VehicleKind.BIKE, "TVS", "BIKE001", "red")),
        ]
        for user_id, name, phone, vehicle in drivers:
            self.register_driver(user_id, name, phone, vehicle)
            self.upload_document(user_id, DriverDocument.DRIVING_LICENSE)
            self.upload_document(user_id, DriverDocument.VEHICLE_REGISTRATION)
            self.verify_driver(user_id)

        self.register_passenger("R100", "Tanvir", "01303910166",
                                payment_method=PaymentMethod(PaymentKind.CARD, "4111111111111111"))
        self.register_passenger("R101", "Tuser", "01760049326",
                                payment_method=PaymentMethod(PaymentKind.WALLET, "mary@payapp.com"))
        self.register_passenger("R102", "Tousiq", "01712345678",
                                payment_method=PaymentMethod(PaymentKind.CASH))
        logger.info("Demo data seeded")

    def __repr__(self):
        return (
            f"<RideSharingSystem(users={len(self.registry.all_users())}, "
            f"rides={len(self.registry.all_rides())}, complaints={len(self.complaints)})>"
        )
