"""
Privileged Functions Router

Endpoints callable only with the service-role key.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.auth.dependencies import verify_service_role
from storefront.auth.roles import assign_role
from storefront.db import get_supabase
from storefront.errors import ERROR_ROLE_FIELDS_REQUIRED, ERROR_ROLE_INVALID, describe_error
from storefront.logging import get_logger
from storefront.services.models import AppRole

from .models import UpdateUserRoleRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


@router.post("/update-user-role")
async def update_user_role(request: UpdateUserRoleRequest, _=Depends(verify_service_role)):
    """Grant a role once; repeated calls answer "Role already set"."""
    if not request.user_id or not request.role:
        return JSONResponse(status_code=400, content={"error": ERROR_ROLE_FIELDS_REQUIRED})

    try:
        role = AppRole(request.role)
    except ValueError:
        return JSONResponse(status_code=400, content={"error": ERROR_ROLE_INVALID})

    try:
        client = await get_supabase()
        data = await assign_role(client, request.user_id, role)
    except Exception as e:
        logger.error(f"Role assignment failed: {type(e).__name__}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": describe_error(e)})

    return {"data": data}
