"""Verification of access tokens issued by the external auth service.

``create_access_token`` mints tokens with the same claims, for local
tooling and tests.
"""

from datetime import timedelta
from typing import Any

from jose import jwt

from hotelbook.config import settings
from hotelbook.utils.datetime import utc_now

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    principal: str, expires_delta: timedelta | None = None, **claims: Any
) -> str:
    """Return a signed access token whose ``sub`` is ``principal``."""
    issued_at = utc_now()
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    payload = {
        **claims,
        "sub": principal,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry, returning the claims.

    Raises:
        jose.JWTError: Bad signature, expired, or not a JWT at all.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def principal_from_token(token: str) -> str | None:
    """Principal id carried by a verified access token.

    Tokens of any other type (refresh tokens, for one) and tokens without
    a string ``sub`` yield ``None``.

    Raises:
        jose.JWTError: If the token cannot be verified.
    """
    claims = decode_token(token)
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None

    sub = claims.get("sub")
    return sub if isinstance(sub, str) and sub else None
