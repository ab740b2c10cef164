"""
Complaint API endpoints.
"""

from fastapi import APIRouter, Depends
from typing import List
import logging

from ride_booking.api.v1.deps import get_system
from ride_booking.api.v1.schemas import ComplaintCreate, ComplaintResolution, ComplaintResponse
from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/", response_model=ComplaintResponse, status_code=201)
async def file_complaint(
    complaint: ComplaintCreate,
    system: RideSharingSystem = Depends(get_system)
):
    """File a complaint against another user."""
    filed = system.file_complaint(complaint.reporter_id, complaint.reported_id, complaint.details)
    return ComplaintResponse.from_complaint(filed)

@router.get("/", response_model=List[ComplaintResponse])
async def list_complaints(
    unresolved_only: bool = False,
    system: RideSharingSystem = Depends(get_system)
):
    """List complaints, optionally only unresolved ones."""
    complaints = system.complaints.open_complaints() if unresolved_only else system.complaints.all()
    return [ComplaintResponse.from_complaint(c) for c in complaints]

@router.post("/{complaint_id}/resolve", response_model=ComplaintResolution)
async def resolve_complaint(
    complaint_id: str,
    system: RideSharingSystem = Depends(get_system)
):
    """Resolve a complaint. Unknown ids are reported, not raised."""
    resolved = system.resolve_complaint(complaint_id)
    return ComplaintResolution(
        complaint_id=complaint_id,
        resolved=resolved,
        message="Complaint resolved" if resolved else "Complaint not found",
    )
