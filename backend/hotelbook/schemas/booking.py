"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for finalizing a booking after payment authorization.

    ``total_cost`` is accepted for client compatibility but ignored; the
    server always recomputes it from the hotel's nightly rate.
    """

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    adult_count: int = Field(..., ge=0)
    child_count: int = Field(0, ge=0)
    check_in: datetime
    check_out: datetime
    payment_intent_id: str = Field(..., min_length=1, max_length=255)
    total_cost: Decimal | None = None

    @model_validator(mode="after")
    def check_guests(self) -> "BookingCreate":
        """At least one guest must be booked."""
        if self.adult_count + self.child_count < 1:
            raise ValueError("at least one guest is required")
        return self


class BookingIntentRequest(BaseModel):
    """Schema for pricing a stay before payment."""

    number_of_nights: int = Field(..., ge=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """A stored booking."""

    id: uuid.UUID
    hotel_id: uuid.UUID
    user_id: str
    first_name: str
    last_name: str
    email: str
    adult_count: int
    child_count: int
    check_in: datetime
    check_out: datetime
    payment_intent_id: str
    total_cost: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingIntentResponse(BaseModel):
    """Opaque payment intent handle and the price it was created for."""

    payment_intent_id: str
    client_secret: str | None = None
    total_cost: Decimal
