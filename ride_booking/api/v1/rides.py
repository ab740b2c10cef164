"""
Ride management API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from ride_booking.api.v1.deps import get_system
from ride_booking.api.v1.schemas import (
    FareProposal,
    FareQuoteResponse,
    RideCancel,
    RideCreate,
    RideResponse,
)
from ride_booking.models.ride import RideStatus
from ride_booking.models.user import VehicleKind
from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/", response_model=RideResponse, status_code=201)
async def book_ride(
    ride_request: RideCreate,
    system: RideSharingSystem = Depends(get_system)
):
    """Book a ride with a verified driver."""
    ride = system.book(
        passenger_id=ride_request.passenger_id,
        driver_id=ride_request.driver_id,
        distance_km=ride_request.distance_km,
        scheduled_time=ride_request.scheduled_time,
        pickup=ride_request.pickup,
        destination=ride_request.destination,
    )
    return RideResponse.from_ride(ride)

@router.get("/", response_model=List[RideResponse])
async def list_rides(
    status: Optional[RideStatus] = None,
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    system: RideSharingSystem = Depends(get_system)
):
    """List rides with optional status filtering."""
    rides = [ride for ride in system.all_rides() if status is None or ride.status == status]
    return [RideResponse.from_ride(ride) for ride in rides[offset:offset + limit]]

@router.get("/quote", response_model=FareQuoteResponse)
async def quote_fare(
    kind: VehicleKind,
    distance_km: float,
    system: RideSharingSystem = Depends(get_system)
):
    """Estimate a fare including the current surge multiplier."""
    return FareQuoteResponse(
        kind=kind,
        distance_km=distance_km,
        surge_multiplier=system.surge_multiplier,
        estimated_fare=system.quote(kind, distance_km),
    )

@router.get("/{ride_id}", response_model=RideResponse)
async def get_ride(
    ride_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Get ride details by ID."""
    return RideResponse.from_ride(system.get_ride(ride_id))

@router.post("/{ride_id}/fare/propose", response_model=RideResponse)
async def propose_fare(
    ride_id: str,
    proposal: FareProposal,
    system: RideSharingSystem = Depends(get_system)
):
    """Propose or counter-propose a fare before the ride starts."""
    return RideResponse.from_ride(
        system.propose_fare(ride_id, proposal.amount, proposal.proposed_by)
    )

@router.post("/{ride_id}/fare/accept", response_model=RideResponse)
async def accept_fare(
    ride_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Accept the open fare proposal."""
    return RideResponse.from_ride(system.accept_fare(ride_id))

@router.post("/{ride_id}/fare/reject", response_model=RideResponse)
async def reject_fare(
    ride_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Reject the open fare proposal."""
    return RideResponse.from_ride(system.reject_fare(ride_id))

@router.post("/{ride_id}/start", response_model=RideResponse)
async def start_ride(
    ride_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Start a ride."""
    return RideResponse.from_ride(system.start(ride_id))

@router.post("/{ride_id}/end", response_model=RideResponse)
async def end_ride(
    ride_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """End an ongoing ride, charging its fare and crediting the driver."""
    return RideResponse.from_ride(system.end(ride_id))

@router.post("/{ride_id}/cancel", response_model=RideResponse)
async def cancel_ride(
    ride_id: str,
    cancellation: Optional[RideCancel] = None,
    system: RideSharingSystem = Depends(get_system)
):
    """Cancel a ride that has not finished."""
    reason = cancellation.reason if cancellation else None
    return RideResponse.from_ride(system.cancel(ride_id, reason))
