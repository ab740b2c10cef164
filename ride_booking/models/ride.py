"""
Ride model and its lifecycle state machine.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Optional
import enum

from ride_booking.core.exceptions import InvalidStateTransitionError
from ride_booking.models.user import User

class RideStatus(str, enum.Enum):
    PENDING = "pending"
    NEGOTIATING = "negotiating"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# NEGOTIATING -> NEGOTIATING is a counter-offer
ALLOWED_TRANSITIONS: Dict[RideStatus, FrozenSet[RideStatus]] = {
    RideStatus.PENDING: frozenset({
        RideStatus.NEGOTIATING, RideStatus.ONGOING, RideStatus.CANCELLED,
    }),
    RideStatus.NEGOTIATING: frozenset({
        RideStatus.NEGOTIATING, RideStatus.PENDING, RideStatus.ONGOING, RideStatus.CANCELLED,
    }),
    RideStatus.ONGOING: frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED}),
    RideStatus.COMPLETED: frozenset(),
    RideStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED})

@dataclass
class Ride:
    """A booked trip between one passenger and one driver."""
    ride_id: str
    passenger: User
    driver: User
    distance_km: float
    scheduled_time: datetime
    pickup: str = ""
    destination: str = ""
    status: RideStatus = RideStatus.PENDING
    fare: float = 0.0
    negotiated_fare: Optional[float] = None
    is_fare_negotiated: bool = False
    cancellation_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def can_transition(self, target: RideStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def check_transition(self, target: RideStatus) -> None:
        """Raise unless the ride may move from its current status to ``target``."""
        if not self.can_transition(target):
            raise InvalidStateTransitionError(
                f"Ride {self.ride_id} cannot go from {self.status.value} to {target.value}"
            )

    def transition_to(self, target: RideStatus) -> None:
        self.check_transition(target)
        self.status = target

    def involves(self, user_id: str) -> bool:
        return user_id in (self.passenger.user_id, self.driver.user_id)

    def __repr__(self):
        return (
            f"<Ride(id={self.ride_id}, status={self.status.value}, "
            f"passenger_id={self.passenger.user_id}, driver_id={self.driver.user_id})>"
        )
