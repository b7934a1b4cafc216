"""FastAPI dependencies for Supabase JWT and service-role authentication."""
from fastapi import Depends, Header, HTTPException

from storefront import config
from storefront.db import get_supabase
from storefront.errors import ERROR_SERVICE_ROLE_REQUIRED
from storefront.logging import get_logger

from .identity import Identity

logger = get_logger(__name__)


async def optional_supabase_auth(
    authorization: str = Header(None, alias="Authorization"),
) -> Identity | None:
    """
    Resolve ``Authorization: Bearer <access_token>`` to a user.

    No header means a guest; a header that does not verify is rejected
    rather than silently treated as a guest.
    """
    if not authorization:
        return None

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    client = await get_supabase()
    try:
        response = await client.auth.get_user(parts[1])
    except Exception as e:
        logger.warning(f"Failed to verify access token: {type(e).__name__}")
        raise HTTPException(status_code=401, detail="Invalid session token")

    user = getattr(response, "user", None) if response else None
    if not user:
        raise HTTPException(status_code=401, detail="Invalid session token")

    return Identity(user_id=user.id, email=getattr(user, "email", None))


async def verify_supabase_auth(identity: Identity | None = Depends(optional_supabase_auth)) -> Identity:
    """Require a signed-in user."""
    if identity is None:
        raise HTTPException(status_code=401, detail="No authorization header")
    return identity


async def verify_service_role(authorization: str = Header(None, alias="Authorization")):
    """
    Require the service-role key as bearer credential.

    Used for privileged functions such as role assignment.
    """
    service_key = config.get_service_role_key()

    if not service_key:
        raise HTTPException(status_code=500, detail="SUPABASE_SERVICE_ROLE_KEY not configured")

    if authorization != f"Bearer {service_key}":
        raise HTTPException(status_code=401, detail=ERROR_SERVICE_ROLE_REQUIRED)

    return True
