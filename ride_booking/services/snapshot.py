"""
Snapshot codec: the system aggregate to and from one JSON document.

Users are written once, keyed by id. Rides and complaints refer to users by
id and are re-linked to the very User objects rebuilt from the ``users``
map, so the restored graph shares references the same way the original did.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ride_booking.core.config import Settings, settings as default_settings
from ride_booking.models.complaint import Complaint
from ride_booking.models.ride import Ride, RideStatus
from ride_booking.models.user import (
    AdminProfile,
    DriverProfile,
    Identity,
    PassengerProfile,
    PaymentKind,
    PaymentMethod,
    User,
    UserRole,
    Vehicle,
    VehicleKind,
)
from ride_booking.services.system import RideSharingSystem

SNAPSHOT_FORMAT_VERSION = 1

class SnapshotFormatError(ValueError):
    """Raised when a decoded snapshot does not describe a consistent system."""

class VehicleRecord(BaseModel):
    vehicle_id: str
    kind: VehicleKind
    model: str
    license_plate: str
    color: str = ""
    available: bool = True

class PaymentMethodRecord(BaseModel):
    kind: PaymentKind = PaymentKind.CASH
    reference: Optional[str] = None

class UserRecord(BaseModel):
    user_id: str
    name: str
    phone: str
    email: str = ""
    role: UserRole

    # Passenger
    payment_method: Optional[PaymentMethodRecord] = None

    # Driver
    vehicle: Optional[VehicleRecord] = None
    commission_rate: Optional[float] = Field(None, ge=0.0, le=1.0)
    verified: bool = False
    license_uploaded: bool = False
    registration_uploaded: bool = False
    earnings: float = 0.0

    ride_history: List[str] = Field(default_factory=list)

class RideRecord(BaseModel):
    ride_id: str
    passenger_id: str
    driver_id: str
    distance_km: float
    scheduled_time: datetime
    pickup: str = ""
    destination: str = ""
    status: RideStatus
    fare: float = 0.0
    negotiated_fare: Optional[float] = None
    is_fare_negotiated: bool = False
    cancellation_reason: Optional[str] = None

class ComplaintRecord(BaseModel):
    complaint_id: str
    reporter_id: str
    reported_id: str
    details: str
    filed_at: datetime
    resolved: bool = False

class SystemSnapshotDocument(BaseModel):
    version: int = SNAPSHOT_FORMAT_VERSION
    admin_id: str
    surge_multiplier: float = Field(1.0, ge=1.0)
    users: Dict[str, UserRecord]
    rides: Dict[str, RideRecord] = Field(default_factory=dict)
    complaints: List[ComplaintRecord] = Field(default_factory=list)

# ===================== Encoding =====================

def _user_record(user: User) -> UserRecord:
    record = UserRecord(
        user_id=user.user_id,
        name=user.identity.name,
        phone=user.identity.phone,
        email=user.identity.email,
        role=user.role,
    )
    profile = user.profile
    if isinstance(profile, PassengerProfile):
        record.payment_method = PaymentMethodRecord(
            kind=profile.payment_method.kind,
            reference=profile.payment_method.reference,
        )
        record.ride_history = list(profile.ride_history)
    elif isinstance(profile, DriverProfile):
        vehicle = profile.vehicle
        record.vehicle = VehicleRecord(
            vehicle_id=vehicle.vehicle_id,
            kind=vehicle.kind,
            model=vehicle.model,
            license_plate=vehicle.license_plate,
            color=vehicle.color,
            available=vehicle.available,
        )
        record.commission_rate = profile.commission_rate
        record.verified = profile.verified
        record.license_uploaded = profile.license_uploaded
        record.registration_uploaded = profile.registration_uploaded
        record.earnings = profile.earnings
        record.ride_history = list(profile.ride_history)
    return record

def dump_system(system: RideSharingSystem) -> SystemSnapshotDocument:
    """Encode the whole aggregate."""
    return SystemSnapshotDocument(
        admin_id=system.admin.user_id,
        surge_multiplier=system.surge_multiplier,
        users={user.user_id: _user_record(user) for user in system.registry.all_users()},
        rides={
            ride.ride_id: RideRecord(
                ride_id=ride.ride_id,
                passenger_id=ride.passenger.user_id,
                driver_id=ride.driver.user_id,
                distance_km=ride.distance_km,
                scheduled_time=ride.scheduled_time,
                pickup=ride.pickup,
                destination=ride.destination,
                status=ride.status,
                fare=ride.fare,
                negotiated_fare=ride.negotiated_fare,
                is_fare_negotiated=ride.is_fare_negotiated,
                cancellation_reason=ride.cancellation_reason,
            )
            for ride in system.registry.all_rides()
        },
        complaints=[
            ComplaintRecord(
                complaint_id=complaint.complaint_id,
                reporter_id=complaint.reporter.user_id,
                reported_id=complaint.reported.user_id,
                details=complaint.details,
                filed_at=complaint.filed_at,
                resolved=complaint.resolved,
            )
            for complaint in system.complaints.all()
        ],
    )

# ===================== Decoding =====================

def _build_user(record: UserRecord, default_commission_rate: float) -> User:
    identity = Identity(
        user_id=record.user_id,
        name=record.name,
        phone=record.phone,
        email=record.email,
    )
    if record.role == UserRole.PASSENGER:
        payment = record.payment_method or PaymentMethodRecord()
        profile = PassengerProfile(
            payment_method=PaymentMethod(kind=payment.kind, reference=payment.reference),
            ride_history=list(record.ride_history),
        )
    elif record.role == UserRole.DRIVER:
        if record.vehicle is None:
            raise SnapshotFormatError(f"Driver {record.user_id} has no vehicle")
        profile = DriverProfile(
            vehicle=Vehicle(**record.vehicle.model_dump()),
            commission_rate=(
                default_commission_rate if record.commission_rate is None
                else record.commission_rate
            ),
            verified=record.verified,
            license_uploaded=record.license_uploaded,
            registration_uploaded=record.registration_uploaded,
            earnings=record.earnings,
            ride_history=list(record.ride_history),
        )
    else:
        profile = AdminProfile()
    return User(identity=identity, profile=profile)

def _lookup(users: Dict[str, User], user_id: str, owner: str) -> User:
    try:
        return users[user_id]
    except KeyError:
        raise SnapshotFormatError(f"{owner} refers to unknown user {user_id}") from None

def restore_system(document: SystemSnapshotDocument,
                   config: Optional[Settings] = None) -> RideSharingSystem:
    """Rebuild an aggregate from a decoded document and repair its id counters."""
    config = config or default_settings
    if document.version != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotFormatError(f"Unsupported snapshot version {document.version}")

    users = {
        user_id: _build_user(record, config.PLATFORM_COMMISSION_RATE)
        for user_id, record in document.users.items()
    }
    admin = _lookup(users, document.admin_id, "Snapshot admin")
    if not admin.is_admin:
        raise SnapshotFormatError(f"Snapshot admin {document.admin_id} is not an admin")

    system = RideSharingSystem.from_settings(
        config,
        admin=admin,
        surge_multiplier=document.surge_multiplier,
        seed=False,
    )
    for user in users.values():
        if user is not admin:
            system.registry.register_user(user)

    for ride_id, record in document.rides.items():
        owner = f"Ride {ride_id}"
        passenger = _lookup(users, record.passenger_id, owner)
        driver = _lookup(users, record.driver_id, owner)
        if not passenger.is_passenger or not driver.is_driver:
            raise SnapshotFormatError(f"{owner} links users with the wrong roles")
        system.registry.add_ride(Ride(
            ride_id=ride_id,
            passenger=passenger,
            driver=driver,
            distance_km=record.distance_km,
            scheduled_time=record.scheduled_time,
            pickup=record.pickup,
            destination=record.destination,
            status=record.status,
            fare=record.fare,
            negotiated_fare=record.negotiated_fare,
            is_fare_negotiated=record.is_fare_negotiated,
            cancellation_reason=record.cancellation_reason,
        ))

    for record in document.complaints:
        owner = f"Complaint {record.complaint_id}"
        system.complaints.restore(Complaint(
            complaint_id=record.complaint_id,
            reporter=_lookup(users, record.reporter_id, owner),
            reported=_lookup(users, record.reported_id, owner),
            details=record.details,
            filed_at=record.filed_at,
            resolved=record.resolved,
        ))

    # Counters live only in memory; move them past every restored id
    system.ride_ids.recover(document.rides.keys())
    system.complaint_ids.recover(record.complaint_id for record in document.complaints)
    return system
