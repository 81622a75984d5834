"""Traveller bookings API."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.api.deps import get_db, get_optional_principal
from hotelbook.schemas.hotel import HotelWithBookingsResponse
from hotelbook.services.my_bookings import list_my_bookings

router = APIRouter(prefix="/api/v1/my-bookings", tags=["my-bookings"])


@router.get(
    "",
    response_model=list[HotelWithBookingsResponse],
    summary="List my bookings grouped by hotel",
)
async def get_my_bookings(
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> list[HotelWithBookingsResponse]:
    """Hotels the current user has booked, each with only their own bookings."""
    return await list_my_bookings(db, principal)
