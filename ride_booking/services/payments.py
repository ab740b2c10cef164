"""
Payment processing.

Payments are numeric and logged only; nothing is sent to a payment gateway.
"""

import logging
from dataclasses import dataclass

from ride_booking.core.exceptions import PaymentError
from ride_booking.models.user import PaymentKind, PaymentMethod

logger = logging.getLogger(__name__)

@dataclass
class PaymentReceipt:
    kind: PaymentKind
    amount: float
    message: str

def validate_payment(amount: float) -> None:
    if amount <= 0:
        raise PaymentError(f"Invalid payment amount: {amount:.2f}")

def process_payment(method: PaymentMethod, amount: float) -> PaymentReceipt:
    """Record a payment of ``amount`` with ``method``."""
    validate_payment(amount)

    if method.kind == PaymentKind.CARD:
        message = f"Card payment of {amount:.2f} charged to {method.masked_reference()}"
    elif method.kind == PaymentKind.WALLET:
        message = f"Wallet payment of {amount:.2f} charged to {method.reference}"
    else:
        message = f"Please pay {amount:.2f} in cash directly to the driver"

    logger.info(message)
    return PaymentReceipt(kind=method.kind, amount=amount, message=message)
