"""
Shared API dependencies.
"""

from fastapi import Request

from ride_booking.services.persistence import PersistenceManager
from ride_booking.services.system import RideSharingSystem

async def get_system(request: Request) -> RideSharingSystem:
    """Dependency to get the system aggregate from app state."""
    return request.app.state.system

async def get_persistence(request: Request) -> PersistenceManager:
    """Dependency to get the persistence manager from app state."""
    return request.app.state.persistence
