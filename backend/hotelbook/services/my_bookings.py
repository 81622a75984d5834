"""My-bookings aggregator — a traveller's bookings grouped by hotel."""

from itertools import groupby

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.models import Booking, Hotel
from hotelbook.schemas.booking import BookingResponse
from hotelbook.schemas.hotel import HotelResponse, HotelWithBookingsResponse
from hotelbook.services.ownership import require_principal


async def list_my_bookings(
    db: AsyncSession, principal: str | None
) -> list[HotelWithBookingsResponse]:
    """Return every hotel the caller has booked, each with only the caller's bookings.

    Hotels come back in storage order, bookings in the order they were
    appended. Other guests' bookings on the same hotel are never loaded.
    """
    user_id = require_principal(principal)

    result = await db.execute(
        select(Hotel, Booking)
        .join(Booking, Booking.hotel_id == Hotel.id)
        .where(Booking.user_id == user_id)
        .order_by(Hotel.created_at.asc(), Hotel.id.asc(), Booking.position.asc())
    )

    response = []
    for hotel, rows in groupby(result.all(), key=lambda row: row[0]):
        response.append(
            HotelWithBookingsResponse(
                **HotelResponse.model_validate(hotel).model_dump(),
                bookings=[BookingResponse.model_validate(booking) for _, booking in rows],
            )
        )
    return response
