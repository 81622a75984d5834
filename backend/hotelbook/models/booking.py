"""Booking model — a confirmed reservation embedded in its hotel."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotelbook.database import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class Booking(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """A reservation owned by exactly one hotel. Never mutated once created."""

    __tablename__ = "bookings"

    hotel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    adult_count: Mapped[int] = mapped_column(Integer, nullable=False)
    child_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_intent_id: Mapped[str] = mapped_column(String(255), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Relationships
    hotel: Mapped["Hotel"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="bookings", lazy="raise_on_sql"
    )

    # The unique index doubles as the payment-intent lookup used for idempotent retries.
    __table_args__ = (
        UniqueConstraint(
            "hotel_id", "payment_intent_id", name="uq_bookings_hotel_payment_intent"
        ),
        UniqueConstraint("hotel_id", "position", name="uq_bookings_hotel_position"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, hotel_id={self.hotel_id}, user_id={self.user_id!r}, "
            f"payment_intent_id={self.payment_intent_id!r})>"
        )
