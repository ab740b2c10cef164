"""
User model for passengers, drivers and the admin.

A user is one shared identity record plus a role-specific profile. The role
is read from the profile variant, so it cannot change after creation.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
import enum

class UserRole(str, enum.Enum):
    PASSENGER = "passenger"
    DRIVER = "driver"
    ADMIN = "admin"

class VehicleKind(str, enum.Enum):
    CAR = "car"
    BIKE = "bike"
    CNG = "cng"

class PaymentKind(str, enum.Enum):
    CARD = "card"
    WALLET = "wallet"
    CASH = "cash"

class DriverDocument(str, enum.Enum):
    DRIVING_LICENSE = "driving_license"
    VEHICLE_REGISTRATION = "vehicle_registration"

@dataclass
class Identity:
    user_id: str
    name: str
    phone: str
    email: str = ""

@dataclass
class Vehicle:
    """A driver's vehicle. ``available`` is False while it is on an ongoing ride."""
    vehicle_id: str
    kind: VehicleKind
    model: str
    license_plate: str
    color: str = ""
    available: bool = True

    def describe(self) -> str:
        return f"{self.model} {self.kind.value} ({self.license_plate})"

@dataclass
class PaymentMethod:
    kind: PaymentKind = PaymentKind.CASH
    reference: Optional[str] = None  # card number or wallet id

    def masked_reference(self) -> Optional[str]:
        if self.reference is None:
            return None
        if self.kind == PaymentKind.CARD:
            return "*" * max(len(self.reference) - 4, 0) + self.reference[-4:]
        return self.reference

@dataclass
class PassengerProfile:
    payment_method: PaymentMethod = field(default_factory=PaymentMethod)
    ride_history: List[str] = field(default_factory=list)

@dataclass
class DriverProfile:
    vehicle: Vehicle
    commission_rate: float
    verified: bool = False
    license_uploaded: bool = False
    registration_uploaded: bool = False
    earnings: float = 0.0
    ride_history: List[str] = field(default_factory=list)

    @property
    def documents_uploaded(self) -> bool:
        return self.license_uploaded and self.registration_uploaded

@dataclass
class AdminProfile:
    pass

Profile = Union[PassengerProfile, DriverProfile, AdminProfile]

_ROLE_BY_PROFILE = {
    PassengerProfile: UserRole.PASSENGER,
    DriverProfile: UserRole.DRIVER,
    AdminProfile: UserRole.ADMIN,
}

@dataclass
class User:
    """A registered user of any role."""
    identity: Identity
    profile: Profile

    def __post_init__(self):
        if type(self.profile) not in _ROLE_BY_PROFILE:
            raise TypeError(f"Unsupported profile type: {type(self.profile).__name__}")

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def role(self) -> UserRole:
        return _ROLE_BY_PROFILE[type(self.profile)]

    @property
    def is_passenger(self) -> bool:
        return self.role == UserRole.PASSENGER

    @property
    def is_driver(self) -> bool:
        return self.role == UserRole.DRIVER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.user_id}, name={self.name}, role={self.role.value})>"

def new_passenger(user_id: str, name: str, phone: str, email: str = "",
                  payment_method: Optional[PaymentMethod] = None) -> User:
    return User(
        identity=Identity(user_id=user_id, name=name, phone=phone, email=email),
        profile=PassengerProfile(payment_method=payment_method or PaymentMethod()),
    )

def new_driver(user_id: str, name: str, phone: str, vehicle: Vehicle,
               commission_rate: float, email: str = "") -> User:
    return User(
        identity=Identity(user_id=user_id, name=name, phone=phone, email=email),
        profile=DriverProfile(vehicle=vehicle, commission_rate=commission_rate),
    )

def new_admin(user_id: str, name: str, phone: str, email: str = "") -> User:
    return User(
        identity=Identity(user_id=user_id, name=name, phone=phone, email=email),
        profile=AdminProfile(),
    )
