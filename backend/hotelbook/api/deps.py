"""Shared API dependencies — single import point for all routers.

Re-exports the database session and principal dependencies so that router
modules can import everything they need from one place::

    from hotelbook.api.deps import get_db, get_optional_principal
"""

from hotelbook.auth.dependencies import get_optional_principal
from hotelbook.database import get_db

__all__ = [
    "get_db",
    "get_optional_principal",
]
