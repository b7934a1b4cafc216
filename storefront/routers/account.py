"""
Account Router

Profile and address book of the signed-in user.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.auth.dependencies import verify_supabase_auth
from storefront.auth.identity import Identity
from storefront.errors import ERROR_ADDRESS_NOT_FOUND, ERROR_PROFILE_NOT_FOUND, describe_error
from storefront.logging import get_logger
from storefront.services.account import AccountService

from .deps import VisitorContext, create_account_service, get_visitor_context
from .models import AddressRequest, UpdateProfileRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/account", tags=["account"])


async def _account(
    user: Identity = Depends(verify_supabase_auth),
    ctx: VisitorContext = Depends(get_visitor_context),
) -> AccountService:
    return await create_account_service(ctx)


# ==================== PROFILE ====================

@router.get("/profile")
async def get_profile(account: AccountService = Depends(_account)):
    profile = await account.get_profile()
    if not profile:
        raise HTTPException(status_code=404, detail=ERROR_PROFILE_NOT_FOUND)
    return profile.model_dump(mode="json")


@router.patch("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    account: AccountService = Depends(_account),
    ctx: VisitorContext = Depends(get_visitor_context),
):
    try:
        profile = await account.update_profile(request.first_name, request.last_name, request.phone)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update profile: {describe_error(e)}")
    if not profile:
        raise HTTPException(status_code=404, detail=ERROR_PROFILE_NOT_FOUND)
    return await ctx.envelope({"profile": profile.model_dump(mode="json")})


# ==================== ADDRESSES ====================

@router.get("/addresses")
async def list_addresses(account: AccountService = Depends(_account)):
    addresses = await account.list_addresses()
    return [a.model_dump(mode="json") for a in addresses]


@router.post("/addresses")
async def create_address(
    request: AddressRequest,
    account: AccountService = Depends(_account),
    ctx: VisitorContext = Depends(get_visitor_context),
):
    try:
        address = await account.create_address(request.model_dump())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add address: {describe_error(e)}")
    return await ctx.envelope({"address": address.model_dump(mode="json")})


@router.put("/addresses/{address_id}")
async def update_address(
    address_id: str,
    request: AddressRequest,
    account: AccountService = Depends(_account),
    ctx: VisitorContext = Depends(get_visitor_context),
):
    try:
        address = await account.update_address(address_id, request.model_dump())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update address: {describe_error(e)}")
    if not address:
        raise HTTPException(status_code=404, detail=ERROR_ADDRESS_NOT_FOUND)
    return await ctx.envelope({"address": address.model_dump(mode="json")})


@router.post("/addresses/{address_id}/default")
async def set_default_address(
    address_id: str,
    account: AccountService = Depends(_account),
    ctx: VisitorContext = Depends(get_visitor_context),
):
    try:
        address = await account.set_default_address(address_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update address: {describe_error(e)}")
    if not address:
        raise HTTPException(status_code=404, detail=ERROR_ADDRESS_NOT_FOUND)
    return await ctx.envelope({"address": address.model_dump(mode="json")})


@router.delete("/addresses/{address_id}")
async def delete_address(
    address_id: str,
    account: AccountService = Depends(_account),
    ctx: VisitorContext = Depends(get_visitor_context),
):
    try:
        deleted = await account.delete_address(address_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete address: {describe_error(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail=ERROR_ADDRESS_NOT_FOUND)
    return await ctx.envelope({"deleted": True})
