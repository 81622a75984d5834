"""Public hotel API — search, suggestions, details, and booking a stay."""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.api.deps import get_db, get_optional_principal
from hotelbook.models.booking import Booking
from hotelbook.models.hotel import Hotel
from hotelbook.schemas.booking import (
    BookingCreate,
    BookingIntentRequest,
    BookingIntentResponse,
    BookingResponse,
)
from hotelbook.schemas.hotel import (
    HotelResponse,
    HotelSearchQuery,
    HotelSearchResponse,
    SortOption,
)
from hotelbook.services import reservations, search

router = APIRouter(prefix="/api/v1/hotels", tags=["hotels"])


@router.get(
    "/search",
    response_model=HotelSearchResponse,
    summary="Search hotels",
)
async def search_hotels(
    destination: str | None = Query(None, description="Matched against city, country or name"),
    adult_count: int | None = Query(None, ge=0),
    child_count: int | None = Query(None, ge=0),
    facilities: list[str] | None = Query(None, description="All must be present"),
    types: list[str] | None = Query(None, description="Any may match"),
    stars: list[int] | None = Query(None, description="Any may match"),
    max_price: Decimal | None = Query(None, gt=0),
    sort_option: SortOption | None = Query(None),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
) -> HotelSearchResponse:
    """Return one page of matching hotels with pagination metadata."""
    query = HotelSearchQuery(
        destination=destination,
        adult_count=adult_count,
        child_count=child_count,
        facilities=facilities,
        types=types,
        stars=stars,
        max_price=max_price,
        sort_option=sort_option,
        page=page,
    )
    return await search.search_hotels(db, query)


@router.get(
    "/search/suggestion/{term}",
    response_model=list[HotelResponse],
    summary="Suggest hotels by name",
)
async def suggest_hotels(
    term: str,
    db: AsyncSession = Depends(get_db),
) -> list[Hotel]:
    """Typeahead lookup on hotel name."""
    return await search.suggest_hotels(db, term)


@router.get(
    "",
    response_model=list[HotelResponse],
    summary="List all hotels",
)
async def list_hotels(db: AsyncSession = Depends(get_db)) -> list[Hotel]:
    """Return every hotel, most recently updated first."""
    return await search.list_hotels(db)


@router.get(
    "/{hotel_id}",
    response_model=HotelResponse,
    summary="Get a hotel by ID",
)
async def get_hotel(
    hotel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Hotel:
    """Public hotel details. Returns 404 if not found."""
    return await search.get_hotel_by_id(db, hotel_id)


@router.post(
    "/{hotel_id}/bookings/payment-intent",
    response_model=BookingIntentResponse,
    summary="Price a stay and open a payment intent",
)
async def create_payment_intent(
    hotel_id: uuid.UUID,
    body: BookingIntentRequest,
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> BookingIntentResponse:
    """Compute the stay price and return the payment intent to confirm client-side."""
    return await reservations.prepare_booking_intent(db, hotel_id, principal, body.number_of_nights)


@router.post(
    "/{hotel_id}/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Finalize a booking",
)
async def create_booking(
    hotel_id: uuid.UUID,
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> Booking:
    """Record the booking for an authorized payment intent.

    Retrying with the same ``payment_intent_id`` returns the original booking.
    """
    return await reservations.create_booking(db, hotel_id, principal, body)
