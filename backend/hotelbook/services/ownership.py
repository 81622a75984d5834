"""Authorization gate — scopes inventory reads and writes to the caller.

Ownership is a predicate injected into the query, not a check made after
fetching. A hotel that exists but belongs to someone else is therefore
indistinguishable from one that does not exist.
"""

import uuid

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.exceptions import AuthorizationError, NotFoundError
from hotelbook.models import Hotel


def require_principal(principal: str | None) -> str:
    """Return ``principal`` or raise ``AuthorizationError`` when anonymous."""
    if not principal:
        raise AuthorizationError()
    return principal


def owned_hotels_query(principal: str) -> Select[tuple[Hotel]]:
    """Base query over the hotels owned by ``principal``."""
    return select(Hotel).where(Hotel.owner_id == principal)


async def list_owned_hotels(db: AsyncSession, principal: str | None) -> list[Hotel]:
    """Return the caller's hotels, most recently updated first."""
    owner = require_principal(principal)
    result = await db.execute(
        owned_hotels_query(owner).order_by(Hotel.last_updated.desc(), Hotel.id)
    )
    return list(result.scalars().all())


async def get_owned_hotel(
    db: AsyncSession,
    principal: str | None,
    hotel_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Hotel:
    """Fetch one of the caller's hotels.

    Raises:
        AuthorizationError: No principal.
        NotFoundError: Missing, or owned by someone else.
    """
    owner = require_principal(principal)
    query = owned_hotels_query(owner).where(Hotel.id == hotel_id)
    if for_update:
        query = query.with_for_update()

    hotel = (await db.execute(query)).scalar_one_or_none()
    if hotel is None:
        raise NotFoundError("Hotel not found")
    return hotel
