"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets a fresh in-memory SQLite database (aiosqlite).
- The test session is bound to an outer transaction that always rolls back.
- SAVEPOINT support is switched on so ``session.begin_nested()`` behaves
  the way it does on PostgreSQL.

Set ``TEST_DATABASE_URL`` to run against a real PostgreSQL database instead.
"""

import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from hotelbook.auth.jwt import create_access_token
from hotelbook.database import Base, get_db
from hotelbook.main import app
from hotelbook.models import Booking, Hotel
from hotelbook.services.reservations import next_booking_position
from hotelbook.utils.datetime import utc_now

_test_db_url = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def _make_engine() -> AsyncEngine:
    if not _test_db_url.startswith("sqlite"):
        return create_async_engine(_test_db_url, echo=False, pool_pre_ping=True)

    engine = create_async_engine(
        _test_db_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; take it over.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


# ---------------------------------------------------------------------------
# Per-test: fresh schema + transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an engine and the schema for a single test."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: principals and auth headers
# ---------------------------------------------------------------------------


@pytest.fixture
def owner_id() -> str:
    """Principal that owns the test hotel."""
    return f"owner-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def guest_id() -> str:
    """Principal that books hotels it does not own."""
    return f"guest-{uuid.uuid4().hex[:8]}"


def _headers_for(principal: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(principal)}"}


@pytest.fixture
def auth_headers(owner_id: str) -> dict[str, str]:
    """Return Authorization headers for the hotel owner."""
    return _headers_for(owner_id)


@pytest.fixture
def guest_headers(guest_id: str) -> dict[str, str]:
    """Return Authorization headers for the guest."""
    return _headers_for(guest_id)


# ---------------------------------------------------------------------------
# Convenience fixtures: hotel and booking helpers
# ---------------------------------------------------------------------------

HotelFactory = Callable[..., Awaitable[Hotel]]


@pytest.fixture
def make_hotel(db_session: AsyncSession, owner_id: str) -> HotelFactory:
    """Return a coroutine that inserts a hotel directly via the ORM."""

    async def _make_hotel(**overrides) -> Hotel:
        values = {
            "owner_id": owner_id,
            "name": "Test Hotel",
            "city": "Test City",
            "country": "Test Country",
            "description": "This is a test hotel",
            "type": "Hotel",
            "adult_count": 2,
            "child_count": 1,
            "facilities": ["WiFi", "Parking", "Pool"],
            "price_per_night": Decimal("100.00"),
            "star_rating": 4,
            "image_urls": ["image1.jpg", "image2.jpg"],
            "last_updated": utc_now(),
            "bookings": [],
        }
        values.update(overrides)
        hotel = Hotel(**values)
        db_session.add(hotel)
        await db_session.flush()
        return hotel

    return _make_hotel


@pytest.fixture
def add_booking(db_session: AsyncSession) -> Callable[..., Awaitable[Booking]]:
    """Return a coroutine that appends a booking to a hotel directly via the ORM."""

    async def _add_booking(hotel: Hotel, user_id: str, **overrides) -> Booking:
        check_in = utc_now() + timedelta(days=7)
        values = {
            "hotel_id": hotel.id,
            "position": await next_booking_position(db_session, hotel.id),
            "user_id": user_id,
            "first_name": "Test",
            "last_name": "User",
            "email": "test@example.com",
            "adult_count": 2,
            "child_count": 1,
            "check_in": check_in,
            "check_out": check_in + timedelta(days=2),
            "payment_intent_id": f"pi_{uuid.uuid4().hex[:12]}",
            "total_cost": Decimal("200.00"),
        }
        values.update(overrides)
        booking = Booking(**values)
        db_session.add(booking)
        await db_session.flush()
        return booking

    return _add_booking


@pytest.fixture
def stored_bookings(db_session: AsyncSession) -> Callable[[Hotel], Awaitable[list[Booking]]]:
    """Return a coroutine listing a hotel's bookings as stored, in append order."""

    async def _stored_bookings(hotel: Hotel) -> list[Booking]:
        result = await db_session.execute(
            select(Booking).where(Booking.hotel_id == hotel.id).order_by(Booking.position)
        )
        return list(result.scalars().all())

    return _stored_bookings


@pytest_asyncio.fixture
async def test_hotel(make_hotel: HotelFactory) -> Hotel:
    """A hotel owned by ``owner_id`` priced at 100 per night."""
    return await make_hotel()
