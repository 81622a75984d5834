"""SQLAlchemy models for HotelBook.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from hotelbook.models.booking import Booking
from hotelbook.models.hotel import Hotel, HotelFacility

__all__ = [
    "Booking",
    "Hotel",
    "HotelFacility",
]
