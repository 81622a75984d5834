"""Pydantic v2 request/response schemas for hotel endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hotelbook.schemas.booking import BookingResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class HotelCreate(BaseModel):
    """Schema for creating a new hotel. ``image_urls`` come from the upload collaborator."""

    name: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, max_length=100)
    adult_count: int = Field(..., ge=1)
    child_count: int = Field(0, ge=0)
    facilities: list[str] = Field(default_factory=list)
    price_per_night: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    star_rating: int = Field(..., ge=1, le=5)
    image_urls: list[str] = Field(default_factory=list)


class HotelUpdate(BaseModel):
    """Schema for partially updating a hotel. All fields optional.

    ``image_urls`` lists the existing images to keep; ``new_image_urls`` are
    freshly uploaded ones appended after them.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=255)
    country: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    type: str | None = Field(None, min_length=1, max_length=100)
    adult_count: int | None = Field(None, ge=1)
    child_count: int | None = Field(None, ge=0)
    facilities: list[str] | None = None
    price_per_night: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    star_rating: int | None = Field(None, ge=1, le=5)
    image_urls: list[str] | None = None
    new_image_urls: list[str] | None = None


class SortOption(str, Enum):
    """Orderings accepted by hotel search."""

    STAR_RATING = "star_rating"
    PRICE_ASC = "price_per_night_asc"
    PRICE_DESC = "price_per_night_desc"


class HotelSearchQuery(BaseModel):
    """Structured hotel search. Every field is optional; supplied fields are ANDed."""

    destination: str | None = None
    adult_count: int | None = Field(None, ge=0)
    child_count: int | None = Field(None, ge=0)
    facilities: list[str] | None = None
    types: list[str] | None = None
    stars: list[int] | None = None
    max_price: Decimal | None = Field(None, gt=0)
    sort_option: SortOption | None = None
    page: int = Field(1, ge=1)

    @field_validator("destination")
    @classmethod
    def _blank_destination_is_absent(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HotelResponse(BaseModel):
    """Public hotel information. Bookings are never included."""

    id: uuid.UUID
    owner_id: str
    name: str
    city: str
    country: str
    description: str
    type: str
    adult_count: int
    child_count: int
    facilities: list[str]
    price_per_night: Decimal
    star_rating: int
    image_urls: list[str]
    last_updated: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("facilities", mode="before")
    @classmethod
    def _facilities_as_list(cls, value: object) -> object:
        # The ORM exposes facilities through an association proxy, not a list.
        if value is not None and not isinstance(value, list):
            return list(value)  # type: ignore[call-overload]
        return value


class HotelWithBookingsResponse(HotelResponse):
    """A hotel carrying only the caller's own bookings."""

    bookings: list[BookingResponse]


class Pagination(BaseModel):
    """Page metadata for search results."""

    total: int
    page: int
    pages: int


class HotelSearchResponse(BaseModel):
    """One page of search results."""

    data: list[HotelResponse]
    pagination: Pagination
