"""Inventory mutation — owners creating and editing their hotels."""

import logging
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.exceptions import ValidationError
from hotelbook.models import Hotel
from hotelbook.services.ownership import get_owned_hotel, require_principal
from hotelbook.utils.datetime import utc_now

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("name", "city", "country", "description", "type")
REQUIRED_FIELDS = (*REQUIRED_TEXT_FIELDS, "adult_count", "price_per_night", "star_rating")

# Fields a caller may set; everything else (owner, bookings, timestamps) is ours.
EDITABLE_FIELDS = frozenset(
    {*REQUIRED_FIELDS, "child_count", "facilities", "image_urls"},
)


def _check_required_text(fields: dict[str, Any], names: tuple[str, ...]) -> None:
    blank = [name for name in names if name in fields and not str(fields[name] or "").strip()]
    if blank:
        raise ValidationError(f"Required field(s) cannot be blank: {', '.join(blank)}")


def merge_image_urls(retained: list[str], new: list[str]) -> list[str]:
    """Retained images first, then new uploads, order kept, duplicates dropped."""
    return list(dict.fromkeys([*retained, *new]))


async def create_hotel(db: AsyncSession, principal: str | None, fields: dict[str, Any]) -> Hotel:
    """Create a hotel owned by ``principal``.

    Raises:
        AuthorizationError: No principal.
        ValidationError: A required descriptive field is missing or blank.
    """
    owner = require_principal(principal)

    missing = [name for name in REQUIRED_FIELDS if fields.get(name) is None]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    _check_required_text(fields, REQUIRED_TEXT_FIELDS)

    values = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
    values.setdefault("child_count", 0)
    values["facilities"] = list(values.get("facilities") or [])
    values["image_urls"] = list(values.get("image_urls") or [])

    hotel = Hotel(owner_id=owner, last_updated=utc_now(), bookings=[], **values)
    db.add(hotel)
    await db.flush()
    await db.refresh(hotel)

    logger.info("Hotel created: %s (owner %s)", hotel.id, owner)
    return hotel


async def update_hotel(
    db: AsyncSession,
    principal: str | None,
    hotel_id: uuid.UUID,
    fields: dict[str, Any],
) -> Hotel:
    """Partially update one of the caller's hotels. Only provided fields change.

    ``image_urls`` is the list of existing images to keep (all of them when
    omitted); ``new_image_urls`` are appended after it.

    Raises:
        AuthorizationError: No principal.
        NotFoundError: Missing or not owned by the caller.
        ValidationError: A required field was explicitly cleared.
    """
    hotel = await get_owned_hotel(db, principal, hotel_id, for_update=True)

    cleared = [name for name in REQUIRED_FIELDS if name in fields and fields[name] is None]
    if cleared:
        raise ValidationError(f"Required field(s) cannot be cleared: {', '.join(cleared)}")
    _check_required_text(fields, REQUIRED_TEXT_FIELDS)

    new_images = fields.get("new_image_urls") or []
    retained = fields.get("image_urls")
    if retained is None:
        retained = list(hotel.image_urls or [])

    for field, value in fields.items():
        if field not in EDITABLE_FIELDS or field == "image_urls":
            continue
        if field == "child_count" and value is None:
            value = 0
        if field == "facilities":
            value = list(value or [])
        setattr(hotel, field, value)

    hotel.image_urls = merge_image_urls(retained, new_images)
    hotel.last_updated = utc_now()

    db.add(hotel)
    await db.flush()
    await db.refresh(hotel)

    logger.info("Hotel updated: %s (owner %s)", hotel.id, hotel.owner_id)
    return hotel
