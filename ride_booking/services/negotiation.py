"""
Fare negotiation on top of the ride state machine.

Either party may propose a fare any number of times before the ride
starts. Accepting a proposal only preloads the fare that ending the ride
will charge; it never charges anything by itself.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ride_booking.core.exceptions import (
    InvalidAmountError,
    InvalidNegotiationStateError,
    InvalidStateTransitionError,
    RoleMismatchError,
)
from ride_booking.models.ride import Ride, RideStatus

if TYPE_CHECKING:
    from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)


def _open_proposal(system: "RideSharingSystem", ride_id: str) -> Ride:
    ride = system.registry.get_ride(ride_id)
    if ride.status not in (RideStatus.PENDING, RideStatus.NEGOTIATING):
        raise InvalidStateTransitionError(
            f"Ride {ride_id} is {ride.status.value}; its fare can no longer be negotiated"
        )
    if ride.status != RideStatus.NEGOTIATING or ride.negotiated_fare is None:
        raise InvalidNegotiationStateError(f"Ride {ride_id} has no open fare proposal")
    return ride


def propose_fare(
    system: "RideSharingSystem",
    ride_id: str,
    amount: float,
    proposed_by: Optional[str] = None,
) -> Ride:
    """
    Propose (or counter-propose) a fare for a ride that has not started.

    Args:
        system: The system aggregate
        ride_id: Ride to negotiate
        amount: Candidate fare
        proposed_by: Optional id of the proposing passenger or driver

    Raises:
        NotFoundError: If the ride does not exist
        InvalidStateTransitionError: If the ride has started or finished
        InvalidAmountError: If the amount is not positive
        RoleMismatchError: If ``proposed_by`` is not a party to the ride
    """
    ride = system.registry.get_ride(ride_id)
    ride.check_transition(RideStatus.NEGOTIATING)
    if amount <= 0:
        raise InvalidAmountError(f"Proposed fare must be positive, got {amount}")
    if proposed_by is not None and not ride.involves(proposed_by):
        raise RoleMismatchError(f"User {proposed_by} is not part of ride {ride_id}")

    ride.negotiated_fare = round(amount, 2)
    ride.is_fare_negotiated = False
    ride.transition_to(RideStatus.NEGOTIATING)

    logger.info(
        f"Fare proposed for ride {ride_id}: {ride.negotiated_fare:.2f}"
        + (f" by {proposed_by}" if proposed_by else "")
    )
    return ride


def accept_fare(system: "RideSharingSystem", ride_id: str) -> Ride:
    """Accept the open proposal; the ride returns to PENDING with the fare locked."""
    ride = _open_proposal(system, ride_id)

    ride.is_fare_negotiated = True
    ride.transition_to(RideStatus.PENDING)

    logger.info(f"Fare accepted for ride {ride_id}: {ride.negotiated_fare:.2f}")
    return ride


def reject_fare(system: "RideSharingSystem", ride_id: str) -> Ride:
    """Reject the open proposal; the ride returns to PENDING with no fare commitment."""
    ride = _open_proposal(system, ride_id)

    rejected = ride.negotiated_fare
    ride.negotiated_fare = None
    ride.is_fare_negotiated = False
    ride.transition_to(RideStatus.PENDING)

    logger.info(f"Fare rejected for ride {ride_id}: {rejected:.2f}")
    return ride
