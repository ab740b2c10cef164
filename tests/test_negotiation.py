import pytest

from ride_booking.core.exceptions import (
    InvalidAmountError,
    InvalidNegotiationStateError,
    InvalidStateTransitionError,
    RoleMismatchError,
)
from ride_booking.models.ride import RideStatus


def test_propose_moves_to_negotiating(system, ride):
    system.propose_fare(ride.ride_id, 150, proposed_by="P1")
    assert ride.status == RideStatus.NEGOTIATING
    assert ride.negotiated_fare == 150.0
    assert ride.is_fare_negotiated is False


def test_counter_offer_overwrites_candidate(system, ride):
    system.propose_fare(ride.ride_id, 100, proposed_by="P1")
    system.propose_fare(ride.ride_id, 140, proposed_by="D1")
    system.propose_fare(ride.ride_id, 125, proposed_by="P1")
    assert ride.negotiated_fare == 125.0
    assert ride.status == RideStatus.NEGOTIATING


def test_accept_locks_fare_and_returns_to_pending(system, ride):
    system.propose_fare(ride.ride_id, 150)
    system.accept_fare(ride.ride_id)
    assert ride.status == RideStatus.PENDING
    assert ride.negotiated_fare == 150.0
    assert ride.is_fare_negotiated is True


def test_new_proposal_after_acceptance_clears_acceptance(system, ride):
    system.propose_fare(ride.ride_id, 150)
    system.accept_fare(ride.ride_id)
    system.propose_fare(ride.ride_id, 170)
    assert ride.status == RideStatus.NEGOTIATING
    assert ride.is_fare_negotiated is False


def test_reject_clears_candidate(system, ride):
    system.propose_fare(ride.ride_id, 150)
    system.reject_fare(ride.ride_id)
    assert ride.status == RideStatus.PENDING
    assert ride.negotiated_fare is None
    assert ride.is_fare_negotiated is False


def test_end_after_reject_without_start_is_invalid(system, ride):
    system.propose_fare(ride.ride_id, 150)
    system.reject_fare(ride.ride_id)
    with pytest.raises(InvalidStateTransitionError):
        system.end(ride.ride_id)


def test_accept_or_reject_without_proposal(system, ride):
    with pytest.raises(InvalidNegotiationStateError):
        system.accept_fare(ride.ride_id)
    with pytest.raises(InvalidNegotiationStateError):
        system.reject_fare(ride.ride_id)
    assert ride.status == RideStatus.PENDING


def test_accept_twice_is_invalid(system, ride):
    system.propose_fare(ride.ride_id, 150)
    system.accept_fare(ride.ride_id)
    with pytest.raises(InvalidNegotiationStateError):
        system.accept_fare(ride.ride_id)
    assert ride.is_fare_negotiated is True


def test_no_negotiation_once_started(system, ride):
    system.start(ride.ride_id)
    with pytest.raises(InvalidStateTransitionError):
        system.propose_fare(ride.ride_id, 150)
    with pytest.raises(InvalidStateTransitionError):
        system.accept_fare(ride.ride_id)
    with pytest.raises(InvalidStateTransitionError):
        system.reject_fare(ride.ride_id)
    assert ride.negotiated_fare is None


def test_no_negotiation_once_cancelled(system, ride):
    system.cancel(ride.ride_id)
    with pytest.raises(InvalidStateTransitionError):
        system.propose_fare(ride.ride_id, 150)


def test_non_positive_proposal_is_rejected(system, ride):
    with pytest.raises(InvalidAmountError):
        system.propose_fare(ride.ride_id, 0)
    assert ride.status == RideStatus.PENDING
    assert ride.negotiated_fare is None


def test_outsider_cannot_propose(system, ride):
    system.register_passenger("P2", "Tuser", "01760049326")
    with pytest.raises(RoleMismatchError):
        system.propose_fare(ride.ride_id, 150, proposed_by="P2")
    assert ride.status == RideStatus.PENDING
