"""
Pydantic schemas for API request/response models.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from ride_booking.models.complaint import Complaint
from ride_booking.models.ride import Ride, RideStatus
from ride_booking.models.user import (
    DriverDocument,
    DriverProfile,
    PassengerProfile,
    PaymentKind,
    User,
    UserRole,
    VehicleKind,
)

# User schemas
class VehicleSchema(BaseModel):
    vehicle_id: str = Field(..., description="Vehicle identifier")
    kind: VehicleKind = Field(..., description="Vehicle kind, selects the per-km rate")
    model: str
    license_plate: str
    color: str = ""

class VehicleResponse(VehicleSchema):
    available: bool

class PaymentMethodSchema(BaseModel):
    kind: PaymentKind = PaymentKind.CASH
    reference: Optional[str] = Field(None, description="Card number or wallet id")

class PassengerCreate(BaseModel):
    user_id: str = Field(..., min_length=1, description="Externally generated unique id")
    name: str
    phone: str
    email: str = ""
    payment_method: PaymentMethodSchema = Field(default_factory=PaymentMethodSchema)

class DriverCreate(BaseModel):
    user_id: str = Field(..., min_length=1, description="Externally generated unique id")
    name: str
    phone: str
    email: str = ""
    vehicle: VehicleSchema
    commission_rate: Optional[float] = Field(None, ge=0.0, le=1.0)

class DocumentUpload(BaseModel):
    document: DriverDocument

class CommissionUpdate(BaseModel):
    commission_rate: float = Field(..., ge=0.0, le=1.0)

class UserResponse(BaseModel):
    user_id: str
    name: str
    phone: str
    email: str
    role: UserRole
    ride_history: List[str] = Field(default_factory=list)
    payment_kind: Optional[PaymentKind] = None
    payment_reference: Optional[str] = None
    vehicle: Optional[VehicleResponse] = None
    verified: Optional[bool] = None
    license_uploaded: Optional[bool] = None
    registration_uploaded: Optional[bool] = None
    commission_rate: Optional[float] = None
    earnings: Optional[float] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        response = cls(
            user_id=user.user_id,
            name=user.identity.name,
            phone=user.identity.phone,
            email=user.identity.email,
            role=user.role,
        )
        profile = user.profile
        if isinstance(profile, PassengerProfile):
            response.ride_history = list(profile.ride_history)
            response.payment_kind = profile.payment_method.kind
            response.payment_reference = profile.payment_method.masked_reference()
        elif isinstance(profile, DriverProfile):
            vehicle = profile.vehicle
            response.ride_history = list(profile.ride_history)
            response.vehicle = VehicleResponse(
                vehicle_id=vehicle.vehicle_id,
                kind=vehicle.kind,
                model=vehicle.model,
                license_plate=vehicle.license_plate,
                color=vehicle.color,
                available=vehicle.available,
            )
            response.verified = profile.verified
            response.license_uploaded = profile.license_uploaded
            response.registration_uploaded = profile.registration_uploaded
            response.commission_rate = profile.commission_rate
            response.earnings = profile.earnings
        return response

# Ride schemas
class RideCreate(BaseModel):
    passenger_id: str
    driver_id: str
    distance_km: float = Field(..., gt=0, description="Trip distance in kilometers")
    scheduled_time: Optional[datetime] = Field(None, description="Defaults to now")
    pickup: str = ""
    destination: str = ""

class FareProposal(BaseModel):
    amount: float = Field(..., gt=0, description="Candidate fare")
    proposed_by: Optional[str] = Field(None, description="Passenger or driver making the offer")

class RideCancel(BaseModel):
    reason: Optional[str] = None

class RideResponse(BaseModel):
    ride_id: str
    passenger_id: str
    driver_id: str
    distance_km: float
    scheduled_time: datetime
    pickup: str
    destination: str
    status: RideStatus
    fare: float
    negotiated_fare: Optional[float]
    is_fare_negotiated: bool
    cancellation_reason: Optional[str]

    @classmethod
    def from_ride(cls, ride: Ride) -> "RideResponse":
        return cls(
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

class FareQuoteResponse(BaseModel):
    kind: VehicleKind
    distance_km: float
    surge_multiplier: float
    estimated_fare: float

# Complaint schemas
class ComplaintCreate(BaseModel):
    reporter_id: str
    reported_id: str
    details: str = Field(..., min_length=1)

class ComplaintResponse(BaseModel):
    complaint_id: str
    reporter_id: str
    reported_id: str
    details: str
    filed_at: datetime
    resolved: bool

    @classmethod
    def from_complaint(cls, complaint: Complaint) -> "ComplaintResponse":
        return cls(
            complaint_id=complaint.complaint_id,
            reporter_id=complaint.reporter.user_id,
            reported_id=complaint.reported.user_id,
            details=complaint.details,
            filed_at=complaint.filed_at,
            resolved=complaint.resolved,
        )

class ComplaintResolution(BaseModel):
    complaint_id: str
    resolved: bool
    message: str

# System schemas
class SurgeUpdate(BaseModel):
    surge_multiplier: float = Field(..., ge=1.0)

class SystemStatus(BaseModel):
    admin_id: str
    surge_multiplier: float
    users: int
    rides: int
    complaints: int
    next_ride_id: str
    next_complaint_id: str

# Error schemas
class ErrorResponse(BaseModel):
    error: str
    message: str
