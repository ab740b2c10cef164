"""
Main API router for v1 endpoints.
"""

from fastapi import APIRouter

from ride_booking.api.v1 import users, rides, complaints, system

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(rides.router, prefix="/rides", tags=["rides"])
api_router.include_router(complaints.router, prefix="/complaints", tags=["complaints"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
