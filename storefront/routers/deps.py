"""
Shared Dependencies for Routers

Every request gets its own visitor context: who the visitor is, their
browser-held values, and a notifier whose messages go back with the
response.
"""
import uuid
from dataclasses import dataclass, field

from fastapi import Depends, Header

from storefront import config
from storefront.auth.dependencies import optional_supabase_auth
from storefront.auth.identity import Identity, SessionIdentityProvider
from storefront.cache import CART_SESSION_KEY, MemoryLocalCache, RedisLocalCache
from storefront.cart import CartManager
from storefront.db import get_supabase
from storefront.notifications import Notifier
from storefront.services.account import AccountService
from storefront.services.repositories import (
    AddressRepository,
    CartRepository,
    CatalogRepository,
    ProfileRepository,
)

CART_SESSION_HEADER = "X-Cart-Session"


@dataclass
class VisitorContext:
    identity: SessionIdentityProvider
    # Values the client keeps in local storage and sends back as headers
    browser: MemoryLocalCache
    notifier: Notifier = field(default_factory=Notifier)

    @property
    def user(self) -> Identity | None:
        return self.identity.current_identity()

    async def ensure_session_id(self) -> str:
        session_id = await self.browser.get(CART_SESSION_KEY)
        if not session_id:
            session_id = str(uuid.uuid4())
            await self.browser.set(CART_SESSION_KEY, session_id)
        return session_id

    async def visitor_id(self) -> str:
        """Stable key for server-side per-visitor storage."""
        if self.user is not None:
            return f"user:{self.user.user_id}"
        return f"guest:{await self.ensure_session_id()}"

    async def envelope(self, payload: dict) -> dict:
        """Attach the guest token and pending notifications to a response."""
        return {
            **payload,
            "session_id": await self.browser.get(CART_SESSION_KEY),
            "notifications": self.notifier.drain(),
        }


async def get_visitor_context(
    identity: Identity | None = Depends(optional_supabase_auth),
    cart_session: str | None = Header(None, alias=CART_SESSION_HEADER),
) -> VisitorContext:
    initial = {CART_SESSION_KEY: cart_session} if cart_session else {}
    return VisitorContext(
        identity=SessionIdentityProvider(identity),
        browser=MemoryLocalCache(initial),
    )


async def create_cart_manager(ctx: VisitorContext) -> CartManager:
    """
    Cart manager for the visitor with its row already loaded.

    With guest merging enabled, a signed-in request that still carries a
    guest token first loads the guest row and then switches to the user,
    so the guest lines are folded into the user cart.
    """
    client = await get_supabase()
    manager = CartManager(
        store=CartRepository(client),
        identity=ctx.identity,
        cache=ctx.browser,
        notifier=ctx.notifier,
        merge_guest_cart=config.CART_MERGE_GUEST_ON_SIGN_IN,
    )

    user = ctx.user
    if manager.merge_guest_cart and user is not None and await ctx.browser.get(CART_SESSION_KEY):
        await ctx.identity.set_identity(None)
        await manager.start()
        await ctx.identity.set_identity(user)
        return manager

    await manager.start()
    return manager


async def create_account_service(ctx: VisitorContext) -> AccountService:
    client = await get_supabase()
    return AccountService(
        profiles=ProfileRepository(client),
        addresses=AddressRepository(client),
        identity=ctx.identity,
        notifier=ctx.notifier,
    )


async def create_vehicle_cache(ctx: VisitorContext) -> RedisLocalCache:
    return RedisLocalCache(await ctx.visitor_id())


async def get_catalog() -> CatalogRepository:
    return CatalogRepository(await get_supabase())
