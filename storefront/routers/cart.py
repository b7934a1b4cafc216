"""
Cart Router

Guest carts are identified by the ``X-Cart-Session`` header; the token is
issued on first use and returned as ``session_id`` for the client to keep.
Signed-in visitors use their own cart row.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.logging import get_logger
from storefront.services.repositories import CatalogRepository

from .deps import VisitorContext, create_cart_manager, get_catalog, get_visitor_context
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


@router.get("/cart")
async def get_cart(ctx: VisitorContext = Depends(get_visitor_context)):
    """Current visitor's cart."""
    manager = await create_cart_manager(ctx)
    return await ctx.envelope(manager.summary())


@router.post("/cart/add")
async def add_to_cart(
    request: AddToCartRequest,
    ctx: VisitorContext = Depends(get_visitor_context),
    catalog: CatalogRepository = Depends(get_catalog),
):
    """Add units of a product at its current catalog price."""
    product = await catalog.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    manager = await create_cart_manager(ctx)
    try:
        await manager.add_line(request.product_id, request.quantity, product.effective_price)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    return await ctx.envelope(manager.summary())


@router.patch("/cart/item")
async def update_cart_item(
    request: UpdateCartItemRequest,
    ctx: VisitorContext = Depends(get_visitor_context),
):
    """Set a line's quantity (0 = remove)."""
    manager = await create_cart_manager(ctx)
    try:
        await manager.update_quantity(request.product_id, request.quantity)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    return await ctx.envelope(manager.summary())


@router.delete("/cart/item")
async def remove_cart_item(product_id: str, ctx: VisitorContext = Depends(get_visitor_context)):
    """Remove a product's line."""
    manager = await create_cart_manager(ctx)
    await manager.remove_line(product_id)
    return await ctx.envelope(manager.summary())


@router.delete("/cart")
async def clear_cart(ctx: VisitorContext = Depends(get_visitor_context)):
    """Empty the cart."""
    manager = await create_cart_manager(ctx)
    await manager.clear()
    return await ctx.envelope(manager.summary())
