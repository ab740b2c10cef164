"""Domain exceptions for ride booking.

Every error is recoverable: the operation that raised it has not changed
any state. The API layer renders them as JSON using ``code`` and
``status_code``.
"""


class RideBookingError(Exception):
    """Base class for all domain errors."""
    code = "ride_booking_error"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class InvalidReferenceError(RideBookingError):
    """Raised when a user id given to an operation does not resolve."""
    code = "invalid_reference"
    status_code = 404


class RoleMismatchError(RideBookingError):
    """Raised when a user id resolves to a user of the wrong role."""
    code = "role_mismatch"
    status_code = 422


class DriverNotVerifiedError(RideBookingError):
    """Raised when booking with a driver that has not been approved."""
    code = "driver_not_verified"
    status_code = 409


class VehicleUnavailableError(RideBookingError):
    """Raised when the driver's vehicle is committed to another ride."""
    code = "vehicle_unavailable"
    status_code = 409


class InvalidStateTransitionError(RideBookingError):
    """Raised when a ride cannot move to the requested status."""
    code = "invalid_state_transition"
    status_code = 409


class InvalidNegotiationStateError(RideBookingError):
    """Raised when there is no open fare proposal to accept or reject."""
    code = "invalid_negotiation_state"
    status_code = 409


class NotFoundError(RideBookingError):
    """Raised when a lookup misses."""
    code = "not_found"
    status_code = 404


class InvalidAmountError(RideBookingError):
    """Raised for a non-positive distance or fare, or a commission rate outside [0, 1]."""
    code = "invalid_amount"
    status_code = 422


class DocumentsMissingError(RideBookingError):
    """Raised when verifying a driver whose documents are not uploaded."""
    code = "documents_missing"
    status_code = 409


class PaymentError(RideBookingError):
    """Raised when a payment cannot be processed."""
    code = "payment_failed"
    status_code = 402


class SnapshotSaveError(RideBookingError):
    """Raised when the system snapshot could not be written."""
    code = "snapshot_save_failed"
    status_code = 503


class DuplicateUserError(RideBookingError):
    """Raised when registering a user id that is already taken."""
    code = "duplicate_user"
    status_code = 409
