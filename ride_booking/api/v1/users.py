"""
User management API endpoints.
"""

from fastapi import APIRouter, Depends
from typing import List, Optional
import logging

from ride_booking.api.v1.deps import get_system
from ride_booking.api.v1.schemas import (
    CommissionUpdate,
    ComplaintResponse,
    DocumentUpload,
    DriverCreate,
    PassengerCreate,
    RideResponse,
    UserResponse,
)
from ride_booking.models.ride import RideStatus
from ride_booking.models.user import PaymentMethod, UserRole, Vehicle
from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/passengers", response_model=UserResponse, status_code=201)
async def register_passenger(
    passenger: PassengerCreate,
    system: RideSharingSystem = Depends(get_system)
):
    """Register a new passenger."""
    user = system.register_passenger(
        user_id=passenger.user_id,
        name=passenger.name,
        phone=passenger.phone,
        email=passenger.email,
        payment_method=PaymentMethod(
            kind=passenger.payment_method.kind,
            reference=passenger.payment_method.reference,
        ),
    )
    return UserResponse.from_user(user)

@router.post("/drivers", response_model=UserResponse, status_code=201)
async def register_driver(
    driver: DriverCreate,
    system: RideSharingSystem = Depends(get_system)
):
    """Register a new driver with their vehicle. Drivers start unverified."""
    user = system.register_driver(
        user_id=driver.user_id,
        name=driver.name,
        phone=driver.phone,
        email=driver.email,
        vehicle=Vehicle(**driver.vehicle.model_dump()),
        commission_rate=driver.commission_rate,
    )
    return UserResponse.from_user(user)

@router.get("/", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    system: RideSharingSystem = Depends(get_system)
):
    """List users with optional role filtering."""
    users = system.users_by_role(role) if role else system.all_users()
    return [UserResponse.from_user(user) for user in users]

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Get user by ID."""
    return UserResponse.from_user(system.get_user(user_id))

@router.post("/{driver_id}/documents", response_model=UserResponse)
async def upload_document(
    driver_id: str,
    upload: DocumentUpload,
    system: RideSharingSystem = Depends(get_system)
):
    """Record that a driver uploaded a document."""
    return UserResponse.from_user(system.upload_document(driver_id, upload.document))

@router.post("/{driver_id}/verify", response_model=UserResponse)
async def verify_driver(
    driver_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Approve a driver whose documents are all uploaded."""
    return UserResponse.from_user(system.verify_driver(driver_id))

@router.put("/{driver_id}/commission", response_model=UserResponse)
async def update_commission(
    driver_id: str,
    update: CommissionUpdate,
    system: RideSharingSystem = Depends(get_system)
):
    """Change a driver's commission rate; applies to rides completed from now on."""
    return UserResponse.from_user(system.set_commission_rate(driver_id, update.commission_rate))

@router.get("/{user_id}/rides", response_model=List[RideResponse])
async def get_user_rides(
    user_id: str,
    status: Optional[RideStatus] = None,
    system: RideSharingSystem = Depends(get_system)
):
    """Get rides where the user is the passenger or the driver."""
    system.get_user(user_id)
    return [RideResponse.from_ride(ride) for ride in system.rides_for_user(user_id, status)]

@router.get("/{user_id}/complaints", response_model=List[ComplaintResponse])
async def get_complaints_against_user(
    user_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Get complaints filed against a user."""
    system.get_user(user_id)
    return [ComplaintResponse.from_complaint(c) for c in system.complaints_against(user_id)]
