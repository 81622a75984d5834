"""Hotel search, typeahead suggestions and public reads."""

import logging
import math
import uuid

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.config import settings
from hotelbook.exceptions import NotFoundError
from hotelbook.models import Hotel, HotelFacility
from hotelbook.schemas.hotel import (
    HotelResponse,
    HotelSearchQuery,
    HotelSearchResponse,
    Pagination,
    SortOption,
)

logger = logging.getLogger(__name__)

# Storage order: the tie-breaker for every sort so paging is stable.
_STORAGE_ORDER = (Hotel.created_at.asc(), Hotel.id.asc())


def _icontains(column: ColumnElement[str], term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match with LIKE wildcards escaped."""
    return func.lower(column).contains(term.lower(), autoescape=True)


def build_search_filters(query: HotelSearchQuery) -> list[ColumnElement[bool]]:
    """Translate a search query into a list of ANDed SQL predicates."""
    filters: list[ColumnElement[bool]] = []

    if query.destination:
        filters.append(
            or_(
                _icontains(Hotel.city, query.destination),
                _icontains(Hotel.country, query.destination),
                _icontains(Hotel.name, query.destination),
            )
        )
    if query.adult_count is not None:
        filters.append(Hotel.adult_count >= query.adult_count)
    if query.child_count is not None:
        filters.append(Hotel.child_count >= query.child_count)
    if query.facilities:
        # Every requested facility must be present.
        for facility in dict.fromkeys(query.facilities):
            filters.append(Hotel.facility_rows.any(HotelFacility.name == facility))
    if query.types:
        filters.append(Hotel.type.in_(query.types))
    if query.stars:
        filters.append(Hotel.star_rating.in_(query.stars))
    if query.max_price is not None:
        filters.append(Hotel.price_per_night <= query.max_price)

    return filters


def build_sort(sort_option: SortOption | None) -> tuple:
    """Return ORDER BY clauses for ``sort_option``, always ending in storage order."""
    if sort_option is SortOption.STAR_RATING:
        return (Hotel.star_rating.desc(), *_STORAGE_ORDER)
    if sort_option is SortOption.PRICE_ASC:
        return (Hotel.price_per_night.asc(), *_STORAGE_ORDER)
    if sort_option is SortOption.PRICE_DESC:
        return (Hotel.price_per_night.desc(), *_STORAGE_ORDER)
    return _STORAGE_ORDER


async def search_hotels(
    db: AsyncSession,
    query: HotelSearchQuery,
    page_size: int | None = None,
) -> HotelSearchResponse:
    """Return one page of hotels matching ``query`` plus pagination metadata.

    Pages past the last one come back empty rather than raising.
    """
    page_size = page_size or settings.search_page_size
    filters = build_search_filters(query)

    # Total count
    count_query = select(func.count()).select_from(Hotel).where(*filters)
    total = (await db.execute(count_query)).scalar_one()

    # Fetch page
    skip = (query.page - 1) * page_size
    items_query = (
        select(Hotel)
        .where(*filters)
        .order_by(*build_sort(query.sort_option))
        .offset(skip)
        .limit(page_size)
    )
    result = await db.execute(items_query)
    hotels = list(result.scalars().all())

    logger.debug("Hotel search matched %d hotels, returning page %d", total, query.page)
    return HotelSearchResponse(
        data=[HotelResponse.model_validate(h) for h in hotels],
        pagination=Pagination(total=total, page=query.page, pages=math.ceil(total / page_size)),
    )


async def suggest_hotels(db: AsyncSession, term: str, limit: int | None = None) -> list[Hotel]:
    """Typeahead: hotels whose name contains ``term``, capped to ``limit``."""
    term = term.strip()
    if not term:
        return []

    limit = limit or settings.suggestion_limit
    result = await db.execute(
        select(Hotel)
        .where(_icontains(Hotel.name, term))
        .order_by(*_STORAGE_ORDER)
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_hotels(db: AsyncSession) -> list[Hotel]:
    """Every hotel, most recently updated first."""
    result = await db.execute(select(Hotel).order_by(Hotel.last_updated.desc(), Hotel.id))
    return list(result.scalars().all())


async def get_hotel_by_id(db: AsyncSession, hotel_id: uuid.UUID) -> Hotel:
    """Public read of a single hotel."""
    hotel = (await db.execute(select(Hotel).where(Hotel.id == hotel_id))).scalar_one_or_none()
    if hotel is None:
        raise NotFoundError("Hotel not found")
    return hotel
