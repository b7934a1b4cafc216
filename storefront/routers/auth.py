"""
Auth Router

Email/password sign-up, sign-in (optionally admin-only), and sign-out.
Each sign-in uses a fresh anon-key client so sessions never leak between
requests.
"""
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from storefront import config
from storefront.auth.dependencies import verify_supabase_auth
from storefront.auth.identity import Identity
from storefront.auth.service import AuthService
from storefront.db import create_anon_client, get_supabase
from storefront.errors import describe_error
from storefront.logging import get_logger
from storefront.services.repositories import RoleRepository

from .deps import VisitorContext, get_visitor_context
from .models import SignInRequest, SignUpRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _failure(ctx: VisitorContext, status_code: int, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=await ctx.envelope({"error": describe_error(error)}),
    )


@router.post("/sign-up")
async def sign_up(request: SignUpRequest, ctx: VisitorContext = Depends(get_visitor_context)):
    client = await create_anon_client()
    service = AuthService(client, ctx.identity, ctx.notifier)
    result = await service.sign_up(
        request.email,
        request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        redirect_url=f"{config.SITE_URL.rstrip('/')}/",
    )
    if not result.ok:
        return await _failure(ctx, 400, result.error)
    return await ctx.envelope({"user_id": result.user_id})


@router.post("/sign-in")
async def sign_in(request: SignInRequest, ctx: VisitorContext = Depends(get_visitor_context)):
    client = await create_anon_client()
    # Role lookups go through the service client; user_roles is not readable with the anon key
    roles = RoleRepository(await get_supabase())
    service = AuthService(client, ctx.identity, ctx.notifier, roles=roles)
    result = await service.sign_in(request.email, request.password, is_admin_login=request.is_admin_login)
    if not result.ok:
        return await _failure(ctx, 401, result.error)
    return await ctx.envelope(
        {
            "user_id": result.user_id,
            "access_token": result.access_token,
            "refresh_token": result.refresh_token,
        }
    )


@router.post("/sign-out")
async def sign_out(
    authorization: str = Header(..., alias="Authorization"),
    user: Identity = Depends(verify_supabase_auth),
    ctx: VisitorContext = Depends(get_visitor_context),
):
    service = AuthService(await get_supabase(), ctx.identity, ctx.notifier)
    result = await service.sign_out(access_token=authorization.split(" ", 1)[1])
    if not result.ok:
        return await _failure(ctx, 500, result.error)
    return await ctx.envelope({"signed_out": True})
