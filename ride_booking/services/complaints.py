"""
Complaint Ledger.

One append-only list of complaints. Per-user views are computed by
filtering it, so a resolution is visible through every view.
"""

import logging
from typing import List, Optional

from ride_booking.models.complaint import Complaint
from ride_booking.models.user import User
from ride_booking.services.sequence import IdSequence

logger = logging.getLogger(__name__)

class ComplaintLedger:
    """Append-only record of complaints."""

    def __init__(self, ids: IdSequence):
        self.ids = ids
        self._complaints: List[Complaint] = []

    def file(self, reporter: User, reported: User, details: str) -> Complaint:
        complaint = Complaint(
            complaint_id=self.ids.next_id(),
            reporter=reporter,
            reported=reported,
            details=details,
        )
        self._complaints.append(complaint)
        logger.info(
            f"Complaint filed: {complaint.complaint_id} by {reporter.user_id} "
            f"against {reported.user_id}"
        )
        return complaint

    def restore(self, complaint: Complaint) -> None:
        """Append an already-numbered complaint (used when loading a snapshot)."""
        self._complaints.append(complaint)

    def find(self, complaint_id: str) -> Optional[Complaint]:
        for complaint in self._complaints:
            if complaint.complaint_id == complaint_id:
                return complaint
        return None

    def resolve(self, complaint_id: str) -> bool:
        """Mark a complaint resolved. Returns False if no such complaint exists."""
        complaint = self.find(complaint_id)
        if complaint is None:
            logger.warning(f"Complaint {complaint_id} not found")
            return False
        if not complaint.resolved:
            complaint.mark_resolved()
            logger.info(f"Complaint resolved: {complaint_id}")
        return True

    def all(self) -> List[Complaint]:
        return list(self._complaints)

    def against(self, user_id: str) -> List[Complaint]:
        return [c for c in self._complaints if c.reported.user_id == user_id]

    def filed_by(self, user_id: str) -> List[Complaint]:
        return [c for c in self._complaints if c.reporter.user_id == user_id]

    def open_complaints(self) -> List[Complaint]:
        return [c for c in self._complaints if not c.resolved]

    def __len__(self):
        return len(self._complaints)
