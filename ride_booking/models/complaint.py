"""
Complaint model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ride_booking.models.user import User

@dataclass
class Complaint:
    """A grievance filed by one user against another."""
    complaint_id: str
    reporter: User
    reported: User
    details: str
    filed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resolved: bool = False

    def mark_resolved(self) -> None:
        # Never reverts to unresolved
        self.resolved = True

    def __repr__(self):
        return f"<Complaint(id={self.complaint_id}, reported={self.reported.user_id}, resolved={self.resolved})>"
