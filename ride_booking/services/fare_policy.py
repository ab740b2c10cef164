"""
Fare Policy: distance to fare, by vehicle kind.
"""

from typing import Dict, Optional

from ride_booking.core.config import Settings, settings
from ride_booking.core.exceptions import InvalidAmountError
from ride_booking.models.user import VehicleKind

def default_rates(config: Optional[Settings] = None) -> Dict[VehicleKind, float]:
    """Per-km rates from configuration."""
    config = config or settings
    return {
        VehicleKind.CAR: config.CAR_RATE_PER_KM,
        VehicleKind.CNG: config.CNG_RATE_PER_KM,
        VehicleKind.BIKE: config.BIKE_RATE_PER_KM,
    }

def rate_for(kind: VehicleKind, rates: Optional[Dict[VehicleKind, float]] = None) -> float:
    return (rates or default_rates())[VehicleKind(kind)]

def calculate_fare(kind: VehicleKind, distance_km: float,
                   rates: Optional[Dict[VehicleKind, float]] = None) -> float:
    """Fare for ``distance_km`` on a vehicle of ``kind``, rounded to cents."""
    if distance_km <= 0:
        raise InvalidAmountError(f"Distance must be positive, got {distance_km}")
    return round(distance_km * rate_for(kind, rates), 2)

def apply_surge(fare: float, multiplier: float) -> float:
    """Quote helper only; the fare charged at ride end never includes surge."""
    if multiplier < 1.0:
        raise InvalidAmountError(f"Surge multiplier must be at least 1.0, got {multiplier}")
    return round(fare * min(multiplier, settings.SURGE_MULTIPLIER_MAX), 2)
