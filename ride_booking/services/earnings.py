"""
Earnings Ledger: commission split and driver running totals.

Credits are never reversed; a disputed fare needs an out-of-band correction.
"""

import logging

from ride_booking.core.exceptions import InvalidAmountError, RoleMismatchError
from ride_booking.models.user import DriverProfile, User

logger = logging.getLogger(__name__)

def driver_share(fare: float, commission_rate: float) -> float:
    """Part of ``fare`` the driver keeps after platform commission."""
    return round(fare * (1 - commission_rate), 2)

def _driver_profile(driver: User) -> DriverProfile:
    if not driver.is_driver:
        raise RoleMismatchError(f"User {driver.user_id} is not a driver")
    return driver.profile

def credit_fare(driver: User, fare: float) -> float:
    """Credit a completed ride's fare at the driver's current commission rate.

    Returns the amount added to the driver's earnings.
    """
    profile = _driver_profile(driver)
    credited = driver_share(fare, profile.commission_rate)
    profile.earnings = round(profile.earnings + credited, 2)
    logger.info(
        f"Credited {credited:.2f} to driver {driver.user_id} "
        f"(fare {fare:.2f}, commission {profile.commission_rate:.2%}, total {profile.earnings:.2f})"
    )
    return credited

def set_commission_rate(driver: User, rate: float) -> None:
    if not 0.0 <= rate <= 1.0:
        raise InvalidAmountError(f"Commission rate must be within [0, 1], got {rate}")
    profile = _driver_profile(driver)
    profile.commission_rate = rate
    logger.info(f"Commission rate for driver {driver.user_id} set to {rate:.2%}")
