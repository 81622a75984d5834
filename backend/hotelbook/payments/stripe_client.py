"""Async Stripe API wrapper used to open payment intents for stays."""

import logging
from decimal import ROUND_HALF_UP, Decimal

import stripe
from stripe import StripeClient

from hotelbook.config import settings

logger = logging.getLogger(__name__)


def get_stripe_client() -> StripeClient:
    """Create a StripeClient instance with async HTTP support."""
    return StripeClient(
        settings.stripe_secret_key,
        http_client=stripe.HTTPXClient(),
    )


def to_minor_units(amount: Decimal) -> int:
    """Convert a decimal amount to the integer minor units Stripe expects."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def create_payment_intent(
    amount: Decimal,
    hotel_id: str,
    user_id: str,
) -> stripe.PaymentIntent:
    """Create a PaymentIntent for ``amount`` tagged with the hotel and guest."""
    client = get_stripe_client()
    logger.info(
        "Creating payment intent for hotel %s, user %s, amount %s", hotel_id, user_id, amount
    )
    intent = await client.v1.payment_intents.create_async(
        params={
            "amount": to_minor_units(amount),
            "currency": settings.stripe_currency,
            "metadata": {"hotel_id": hotel_id, "user_id": user_id},
        }
    )
    logger.info("Created payment intent %s for hotel %s", intent.id, hotel_id)
    return intent
