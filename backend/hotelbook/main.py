"""HotelBook API: FastAPI app, error rendering and router wiring."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import stripe
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hotelbook.api.v1.auth import router as auth_router
from hotelbook.api.v1.hotels import router as hotels_router
from hotelbook.api.v1.my_bookings import router as my_bookings_router
from hotelbook.api.v1.my_hotels import router as my_hotels_router
from hotelbook.config import settings
from hotelbook.database import STORE_UNAVAILABLE_ERRORS, engine
from hotelbook.exceptions import AuthorizationError, HotelBookError, StoreUnavailableError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "%s %s starting (%s)", settings.app_name, settings.app_version, settings.environment
    )
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Hotel search, reservations and owner listings.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------


def _error_response(exc: HotelBookError) -> JSONResponse:
    headers: dict[str, str] = {}
    if isinstance(exc, AuthorizationError):
        headers["WWW-Authenticate"] = "Bearer"
    if exc.retryable:
        headers["Retry-After"] = RETRY_AFTER_SECONDS
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


@app.exception_handler(HotelBookError)
async def hotelbook_error_handler(request: Request, exc: HotelBookError) -> JSONResponse:
    """Render domain errors with the status code they carry."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc)
    return _error_response(exc)


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Connection and pool failures surface as a transient 503."""
    logger.error("%s %s: inventory store unavailable: %s", request.method, request.url.path, exc)
    return _error_response(StoreUnavailableError())


for _error_type in STORE_UNAVAILABLE_ERRORS:
    app.add_exception_handler(_error_type, store_unavailable_handler)


@app.exception_handler(stripe.StripeError)
async def stripe_error_handler(request: Request, exc: stripe.StripeError) -> JSONResponse:
    """The payment collaborator failed while opening an intent."""
    logger.error("Stripe error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Payment provider error"},
    )


# Routers
app.include_router(auth_router)
app.include_router(hotels_router)
app.include_router(my_hotels_router)
app.include_router(my_bookings_router)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok", "version": settings.app_version}
