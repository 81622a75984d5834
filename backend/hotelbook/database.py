"""Async SQLAlchemy engine, session factory, and declarative base."""

import logging
import uuid
from collections.abc import AsyncIterator
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from hotelbook.config import settings
from hotelbook.exceptions import StoreUnavailableError
from hotelbook.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Errors that mean "the store could not be reached", as opposed to a bad query.
STORE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)

engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_timeout=settings.db_pool_timeout,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UUIDPrimaryKeyMixin:
    """Mixin that adds a UUID primary key column."""

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


class CreatedAtMixin:
    """Mixin that adds a client-side ``created_at`` timestamp.

    Set in Python rather than by the server so rows inserted in the same
    transaction still get distinct, insertion-ordered values.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield an async database session for FastAPI dependency injection.

    Commits when the request handler succeeds, rolls back otherwise.
    Connection-level failures are re-raised as ``StoreUnavailableError``.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except STORE_UNAVAILABLE_ERRORS as exc:
            await session.rollback()
            logger.error("Inventory store unavailable: %s", exc)
            raise StoreUnavailableError() from exc
        except Exception:
            await session.rollback()
            raise
