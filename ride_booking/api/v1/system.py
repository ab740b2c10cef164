"""
System administration API endpoints.
"""

from fastapi import APIRouter, Depends
import logging

from ride_booking.api.v1.deps import get_persistence, get_system
from ride_booking.api.v1.schemas import SurgeUpdate, SystemStatus
from ride_booking.services.persistence import PersistenceManager
from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)
router = APIRouter()

def _status(system: RideSharingSystem) -> SystemStatus:
    return SystemStatus(
        admin_id=system.admin.user_id,
        surge_multiplier=system.surge_multiplier,
        users=len(system.all_users()),
        rides=len(system.all_rides()),
        complaints=len(system.complaints),
        next_ride_id=system.ride_ids.peek(),
        next_complaint_id=system.complaint_ids.peek(),
    )

@router.get("/status", response_model=SystemStatus)
async def get_status(system: RideSharingSystem = Depends(get_system)):
    """Summary of the system aggregate."""
    return _status(system)

@router.put("/surge", response_model=SystemStatus)
async def update_surge(
    update: SurgeUpdate,
    system: RideSharingSystem = Depends(get_system)
):
    """Set the surge multiplier used for fare quotes."""
    system.set_surge_multiplier(update.surge_multiplier)
    logger.info(f"Surge multiplier set to {update.surge_multiplier}")
    return _status(system)

@router.post("/snapshot", response_model=SystemStatus)
async def save_snapshot(
    system: RideSharingSystem = Depends(get_system),
    persistence: PersistenceManager = Depends(get_persistence)
):
    """Write a snapshot now instead of waiting for shutdown."""
    await persistence.save(system)
    return _status(system)
