"""
Core ride lifecycle operations.

This module handles:
    - Booking rides
    - Starting rides
    - Ending rides (fare, payment, earnings, histories)
    - Cancelling rides

Every operation validates before it mutates, so a raised error leaves the
system exactly as it was.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from ride_booking.core.exceptions import (
    DriverNotVerifiedError,
    InvalidAmountError,
    VehicleUnavailableError,
)
from ride_booking.models.ride import Ride, RideStatus
from ride_booking.models.user import UserRole
from ride_booking.services import earnings, fare_policy, payments

if TYPE_CHECKING:
    from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)


def book_ride(
    system: "RideSharingSystem",
    passenger_id: str,
    driver_id: str,
    distance_km: float,
    scheduled_time: Optional[datetime] = None,
    pickup: str = "",
    destination: str = "",
) -> Ride:
    """
    Book a ride between a passenger and a driver.

    Args:
        system: The system aggregate
        passenger_id: Id of a registered passenger
        driver_id: Id of a registered, verified driver
        distance_km: Trip distance in kilometers
        scheduled_time: When the trip should happen (defaults to now)
        pickup: Pickup label
        destination: Destination label

    Returns:
        The new ride, in PENDING

    Raises:
        InvalidReferenceError: If either id does not resolve
        RoleMismatchError: If an id resolves to the wrong role
        DriverNotVerifiedError: If the driver is not approved
        VehicleUnavailableError: If the driver's vehicle is committed
        InvalidAmountError: If the distance is not positive
    """
    passenger = system.registry.resolve(passenger_id, UserRole.PASSENGER)
    driver = system.registry.resolve(driver_id, UserRole.DRIVER)

    if not driver.profile.verified:
        raise DriverNotVerifiedError(f"Driver {driver_id} has not been verified")
    if not driver.profile.vehicle.available:
        raise VehicleUnavailableError(
            f"Vehicle {driver.profile.vehicle.vehicle_id} is on another ride"
        )
    if distance_km <= 0:
        raise InvalidAmountError(f"Distance must be positive, got {distance_km}")

    ride = Ride(
        ride_id=system.ride_ids.next_id(),
        passenger=passenger,
        driver=driver,
        distance_km=distance_km,
        scheduled_time=scheduled_time or datetime.now(timezone.utc),
        pickup=pickup,
        destination=destination,
    )
    system.registry.add_ride(ride)

    logger.info(f"Ride booked: {ride.ride_id} by passenger {passenger_id} with driver {driver_id}")
    return ride


def start_ride(system: "RideSharingSystem", ride_id: str) -> Ride:
    """
    Start a pending or negotiating ride.

    Raises:
        NotFoundError: If the ride does not exist
        InvalidStateTransitionError: If the ride is not PENDING or NEGOTIATING
        VehicleUnavailableError: If the vehicle is already committed
    """
    ride = system.registry.get_ride(ride_id)
    ride.check_transition(RideStatus.ONGOING)

    vehicle = ride.driver.profile.vehicle
    if not vehicle.available:
        raise VehicleUnavailableError(f"Vehicle {vehicle.vehicle_id} is on another ride")

    vehicle.available = False
    ride.transition_to(RideStatus.ONGOING)

    logger.info(f"Ride started: {ride_id} ({vehicle.describe()})")
    return ride


def charged_fare(system: "RideSharingSystem", ride: Ride) -> float:
    """The fare a ride would be charged if it ended now."""
    if ride.is_fare_negotiated and ride.negotiated_fare is not None:
        return ride.negotiated_fare
    return fare_policy.calculate_fare(
        ride.driver.profile.vehicle.kind, ride.distance_km, system.rates
    )


def end_ride(system: "RideSharingSystem", ride_id: str) -> Ride:
    """
    Complete an ongoing ride.

    The charged fare is the accepted negotiated fare when there is one,
    otherwise the Fare Policy fare for the distance.

    Raises:
        NotFoundError: If the ride does not exist
        InvalidStateTransitionError: If the ride is not ONGOING
        PaymentError: If the fare cannot be paid
    """
    ride = system.registry.get_ride(ride_id)
    ride.check_transition(RideStatus.COMPLETED)

    fare = charged_fare(system, ride)
    passenger, driver = ride.passenger, ride.driver

    payments.process_payment(passenger.profile.payment_method, fare)
    earnings.credit_fare(driver, fare)

    passenger.profile.ride_history.append(ride.ride_id)
    driver.profile.ride_history.append(ride.ride_id)
    driver.profile.vehicle.available = True

    ride.fare = fare
    ride.transition_to(RideStatus.COMPLETED)

    logger.info(f"Ride completed: {ride_id}, fare {fare:.2f}")
    return ride


def cancel_ride(system: "RideSharingSystem", ride_id: str, reason: Optional[str] = None) -> Ride:
    """
    Cancel a ride that has not finished.

    Cancelling after an accepted fare negotiation carries no penalty.

    Raises:
        NotFoundError: If the ride does not exist
        InvalidStateTransitionError: If the ride is COMPLETED or CANCELLED
    """
    ride = system.registry.get_ride(ride_id)
    ride.check_transition(RideStatus.CANCELLED)

    if ride.status == RideStatus.ONGOING:
        ride.driver.profile.vehicle.available = True

    ride.cancellation_reason = reason
    ride.transition_to(RideStatus.CANCELLED)

    logger.info(f"Ride cancelled: {ride_id}" + (f" ({reason})" if reason else ""))
    return ride
