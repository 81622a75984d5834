"""FastAPI dependency that resolves the authenticated principal.

Authentication never fails here. An absent, expired or forged token
simply yields ``None``; services decide whether a principal is required
and raise ``AuthorizationError`` themselves, before touching the store.
"""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from hotelbook.auth.jwt import principal_from_token
from hotelbook.config import settings

logger = logging.getLogger(__name__)

# Optional bearer: returns None if no token provided
_bearer_scheme_optional = HTTPBearer(auto_error=False)


async def get_optional_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme_optional),
) -> str | None:
    """Return the principal id from a Bearer header or the auth cookie.

    The Authorization header wins when both are present.
    """
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None

    try:
        return principal_from_token(token)
    except JWTError:
        logger.debug("Ignoring unverifiable auth token")
        return None
