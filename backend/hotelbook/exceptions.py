"""Domain errors raised by the booking and search core.

Services raise these; ``hotelbook.main`` renders them as HTTP responses.
Each carries the status code it maps to, so routers never translate
errors by hand.
"""

from fastapi import status


class HotelBookError(Exception):
    """Base class for all errors surfaced by the core."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"
    retryable: bool = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


class ValidationError(HotelBookError):
    """Input reached the core malformed or out of range (never retried)."""

    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    default_message = "Invalid input"


class AuthorizationError(HotelBookError):
    """No authenticated principal where one is required."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized"


class NotFoundError(HotelBookError):
    """Target is absent, or present but not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(HotelBookError):
    """A concurrent booking race could not be resolved by the internal retry."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Booking is being processed concurrently, retry later"
    retryable = True


class PaymentIntentInUseError(ConflictError):
    """The payment intent already backs a booking made by someone else."""

    default_message = "Payment intent already used"
    retryable = False


class StoreUnavailableError(HotelBookError):
    """The inventory store could not be reached or timed out."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Inventory store unavailable"
    retryable = True
