"""Owner hotel API — ownership-scoped listing management."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.api.deps import get_db, get_optional_principal
from hotelbook.models.hotel import Hotel
from hotelbook.schemas.hotel import HotelCreate, HotelResponse, HotelUpdate
from hotelbook.services import hotels, ownership

router = APIRouter(prefix="/api/v1/my-hotels", tags=["my-hotels"])


@router.post(
    "",
    response_model=HotelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new hotel",
)
async def create_hotel(
    body: HotelCreate,
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> Hotel:
    """Create a hotel owned by the authenticated user."""
    return await hotels.create_hotel(db, principal, body.model_dump())


@router.get(
    "",
    response_model=list[HotelResponse],
    summary="List hotels owned by the current user",
)
async def list_my_hotels(
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> list[Hotel]:
    """Return the current user's hotels, most recently updated first."""
    return await ownership.list_owned_hotels(db, principal)


@router.get(
    "/{hotel_id}",
    response_model=HotelResponse,
    summary="Get one of my hotels",
)
async def get_my_hotel(
    hotel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> Hotel:
    """Retrieve a single hotel. Returns 404 if not found or not owned."""
    return await ownership.get_owned_hotel(db, principal, hotel_id)


@router.put(
    "/{hotel_id}",
    response_model=HotelResponse,
    summary="Update one of my hotels",
)
async def update_my_hotel(
    hotel_id: uuid.UUID,
    body: HotelUpdate,
    db: AsyncSession = Depends(get_db),
    principal: str | None = Depends(get_optional_principal),
) -> Hotel:
    """Partially update a hotel. Only explicitly set fields are changed."""
    return await hotels.update_hotel(db, principal, hotel_id, body.model_dump(exclude_unset=True))
