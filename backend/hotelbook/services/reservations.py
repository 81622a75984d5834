"""Reservation engine — pricing stays and appending bookings idempotently.

The payment-intent id supplied with a booking is its idempotency key:
per hotel, at most one booking can exist for a given intent. Replaying a
booking request returns the stored booking instead of creating another.
The price is always recomputed here from the hotel's nightly rate, both
when the intent is prepared and when the booking is finalized.
"""

import logging
import math
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotelbook.config import settings
from hotelbook.exceptions import (
    ConflictError,
    NotFoundError,
    PaymentIntentInUseError,
    ValidationError,
)
from hotelbook.models import Booking, Hotel
from hotelbook.payments import stripe_client
from hotelbook.schemas.booking import BookingCreate, BookingIntentResponse
from hotelbook.services.ownership import require_principal
from hotelbook.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

_SECONDS_PER_NIGHT = 24 * 60 * 60
_CENTS = Decimal("0.01")


def compute_nights(check_in: datetime, check_out: datetime) -> int:
    """Number of nights between two timestamps, partial days rounded up.

    Raises:
        ValidationError: ``check_out`` is not after ``check_in``.
    """
    seconds = (ensure_utc(check_out) - ensure_utc(check_in)).total_seconds()
    nights = math.ceil(seconds / _SECONDS_PER_NIGHT)
    if nights <= 0:
        raise ValidationError("check_out must be after check_in")
    return nights


def compute_total_cost(price_per_night: Decimal, nights: int) -> Decimal:
    """Authoritative stay price: nightly rate times nights, in cents."""
    if nights <= 0:
        raise ValidationError("number of nights must be positive")
    return (Decimal(price_per_night) * nights).quantize(_CENTS)


async def _load_hotel(
    db: AsyncSession, hotel_id: uuid.UUID, *, for_update: bool = False
) -> Hotel:
    query = select(Hotel).where(Hotel.id == hotel_id)
    if for_update:
        query = query.with_for_update()
    hotel = (await db.execute(query)).scalar_one_or_none()
    if hotel is None:
        raise NotFoundError("Hotel not found")
    return hotel


async def find_booking_by_intent(
    db: AsyncSession, hotel_id: uuid.UUID, payment_intent_id: str
) -> Booking | None:
    """Return the booking already recorded for ``payment_intent_id`` on a hotel."""
    result = await db.execute(
        select(Booking).where(
            Booking.hotel_id == hotel_id,
            Booking.payment_intent_id == payment_intent_id,
        )
    )
    return result.scalar_one_or_none()


async def prepare_booking_intent(
    db: AsyncSession,
    hotel_id: uuid.UUID,
    principal: str | None,
    nights: int,
) -> BookingIntentResponse:
    """Price a stay and open a payment intent for it. Nothing is persisted locally."""
    user_id = require_principal(principal)
    hotel = await _load_hotel(db, hotel_id)
    total_cost = compute_total_cost(hotel.price_per_night, nights)

    intent = await stripe_client.create_payment_intent(
        amount=total_cost,
        hotel_id=str(hotel.id),
        user_id=user_id,
    )
    return BookingIntentResponse(
        payment_intent_id=intent.id,
        client_secret=intent.client_secret,
        total_cost=total_cost,
    )


async def next_booking_position(db: AsyncSession, hotel_id: uuid.UUID) -> int:
    """Position the next booking on a hotel takes; 0 for a hotel with none."""
    result = await db.execute(
        select(func.coalesce(func.max(Booking.position) + 1, 0)).where(
            Booking.hotel_id == hotel_id
        )
    )
    return result.scalar_one()


async def _append_booking(
    db: AsyncSession,
    hotel_id: uuid.UUID,
    user_id: str,
    body: BookingCreate,
) -> Booking:
    """One attempt at check-then-append, inside a savepoint.

    The hotel row is locked for the duration, so concurrent attempts on
    the same hotel serialize; the unique constraints catch anything the
    lock cannot (e.g. databases without row locks).
    """
    async with db.begin_nested():
        hotel = await _load_hotel(db, hotel_id, for_update=True)
        nights = compute_nights(body.check_in, body.check_out)
        total_cost = compute_total_cost(hotel.price_per_night, nights)

        existing = await find_booking_by_intent(db, hotel.id, body.payment_intent_id)
        if existing is not None:
            if existing.user_id != user_id:
                logger.warning(
                    "User %s replayed payment intent %s owned by another user on hotel %s",
                    user_id,
                    body.payment_intent_id,
                    hotel.id,
                )
                raise PaymentIntentInUseError()
            logger.info(
                "Replayed booking for payment intent %s on hotel %s",
                body.payment_intent_id,
                hotel.id,
            )
            return existing

        booking = Booking(
            hotel_id=hotel.id,
            position=await next_booking_position(db, hotel.id),
            user_id=user_id,
            first_name=body.first_name,
            last_name=body.last_name,
            email=str(body.email),
            adult_count=body.adult_count,
            child_count=body.child_count,
            check_in=body.check_in,
            check_out=body.check_out,
            payment_intent_id=body.payment_intent_id,
            total_cost=total_cost,
        )
        db.add(booking)
        hotel.last_updated = utc_now()
        await db.flush()

    logger.info(
        "Booking %s created on hotel %s for user %s (%d nights, total %s)",
        booking.id,
        hotel.id,
        user_id,
        nights,
        total_cost,
    )
    return booking


async def create_booking(
    db: AsyncSession,
    hotel_id: uuid.UUID,
    principal: str | None,
    body: BookingCreate,
) -> Booking:
    """Finalize a booking for an already-authorized payment intent.

    Any authenticated principal may book any hotel. The same principal
    calling this again with the same ``payment_intent_id`` gets the
    original booking back; anyone else is refused.

    Raises:
        AuthorizationError: No principal.
        NotFoundError: Hotel does not exist.
        ValidationError: Non-positive night count.
        PaymentIntentInUseError: The intent already backs another user's booking.
        ConflictError: A concurrent duplicate could not be resolved after retrying.
    """
    user_id = require_principal(principal)
    if body.total_cost is not None:
        logger.debug(
            "Ignoring client-supplied total_cost %s for hotel %s", body.total_cost, hotel_id
        )

    attempts = settings.booking_conflict_retries + 1
    for attempt in range(1, attempts + 1):
        try:
            return await _append_booking(db, hotel_id, user_id, body)
        except IntegrityError as exc:
            logger.warning(
                "Booking append conflict on hotel %s, intent %s (attempt %d/%d): %s",
                hotel_id,
                body.payment_intent_id,
                attempt,
                attempts,
                exc.orig,
            )

    raise ConflictError()
