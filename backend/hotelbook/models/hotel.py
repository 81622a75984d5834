"""Hotel model — an owner's listing and its facility tags."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotelbook.database import Base, CreatedAtMixin, UUIDPrimaryKeyMixin
from hotelbook.utils.datetime import utc_now


class HotelFacility(Base):
    """One facility tag of a hotel; ``position`` keeps the display order."""

    __tablename__ = "hotel_facilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hotel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<HotelFacility(hotel_id={self.hotel_id}, name={self.name!r})>"


class Hotel(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """A hotel listing. Owns its bookings; mutated only by its owner or by reservations."""

    __tablename__ = "hotels"

    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    adult_count: Mapped[int] = mapped_column(Integer, nullable=False)
    child_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    star_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    image_urls: Mapped[list] = mapped_column(JSON, default=list)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    # Relationships
    facility_rows: Mapped[list[HotelFacility]] = relationship(
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=HotelFacility.position,
        collection_class=ordering_list("position"),
    )
    # Never loaded with the hotel; bookings are queried directly by hotel_id.
    bookings: Mapped[list["Booking"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="hotel",
        lazy="raise_on_sql",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Booking.position",
    )

    facilities: AssociationProxy[list[str]] = association_proxy(
        "facility_rows",
        "name",
        creator=lambda name: HotelFacility(name=name),
    )

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name={self.name!r}, owner_id={self.owner_id!r})>"
