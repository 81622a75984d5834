"""Token introspection for clients holding a token from the auth service."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hotelbook.api.deps import get_optional_principal
from hotelbook.services.ownership import require_principal

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class PrincipalResponse(BaseModel):
    """The principal a valid token resolves to."""

    user_id: str


@router.get(
    "/validate-token",
    response_model=PrincipalResponse,
    summary="Validate the current access token",
)
async def validate_token(
    principal: str | None = Depends(get_optional_principal),
) -> PrincipalResponse:
    """Return the caller's principal id, or 401 when the token is absent or invalid."""
    return PrincipalResponse(user_id=require_principal(principal))
