"""
Vehicle & Catalog Router

Fitment selector choices, the visitor's saved vehicle, and catalog reads.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.logging import get_logger
from storefront.services.money import to_float
from storefront.services.repositories import CatalogRepository
from storefront.vehicle import VehicleSelection, VehicleSelector, vehicle_options

from .deps import (
    VisitorContext,
    create_account_service,
    create_vehicle_cache,
    get_catalog,
    get_visitor_context,
)
from .models import SaveVehicleRequest

logger = get_logger(__name__)

router = APIRouter(tags=["vehicle"])


def _product_card(product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "slug": product.slug,
        "sku": product.sku,
        "price": to_float(product.price),
        "sale_price": to_float(product.sale_price) if product.sale_price is not None else None,
        "image_url": product.images[0] if product.images else None,
        "rating": to_float(product.rating),
        "rating_count": product.rating_count,
        "brand": (product.brand or {}).get("name"),
        "category": (product.category or {}).get("name"),
    }


async def _create_selector(ctx: VisitorContext, compact: bool = False) -> VehicleSelector:
    """Selector seeded from the profile (signed in) or the visitor cache."""
    account = await create_account_service(ctx)
    supplied = await account.get_saved_vehicle() if ctx.user else None
    selector = VehicleSelector(
        cache=await create_vehicle_cache(ctx),
        on_change=account.save_vehicle,
        selected_vehicle=supplied,
        compact=compact,
    )
    await selector.load_cached()
    return selector


# ==================== SELECTOR ====================

@router.get("/vehicles/options")
async def get_vehicle_options(year: int | None = None, make: str | None = None, model: str | None = None):
    """Choices for each selector level given what is already picked."""
    return vehicle_options(year, make, model)


@router.get("/vehicles/selected")
async def get_selected_vehicle(
    compact: bool = False,
    expand: bool = False,
    ctx: VisitorContext = Depends(get_visitor_context),
):
    """Saved vehicle; compact callers get a badge until they ask to expand the form."""
    selector = await _create_selector(ctx, compact=compact)
    if expand:
        selector.expand()
    return await ctx.envelope({**selector.state(), "label": selector.label})


@router.put("/vehicles/selected")
async def save_selected_vehicle(
    request: SaveVehicleRequest,
    compact: bool = False,
    ctx: VisitorContext = Depends(get_visitor_context),
):
    """Save a vehicle to the visitor cache and, when signed in, the profile."""
    selector = await _create_selector(ctx, compact=compact)
    try:
        selector.set_year(request.year)
        selector.set_make(request.make)
        selector.set_model(request.model)
        selector.set_engine(request.engine)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    await selector.save()
    return await ctx.envelope({**selector.state(), "label": selector.label})


@router.delete("/vehicles/selected")
async def clear_selected_vehicle(ctx: VisitorContext = Depends(get_visitor_context)):
    selector = await _create_selector(ctx)
    await selector.clear()
    return await ctx.envelope(selector.state())


# ==================== CATALOG ====================

@router.get("/catalog/featured")
async def get_featured_products(catalog: CatalogRepository = Depends(get_catalog)):
    products = await catalog.get_featured_products()
    return [_product_card(p) for p in products]


@router.get("/catalog/categories")
async def get_categories(catalog: CatalogRepository = Depends(get_catalog)):
    categories = await catalog.get_root_categories()
    return [c.model_dump() for c in categories]


@router.get("/catalog/fitment")
async def get_parts_for_vehicle(
    year: int,
    make: str,
    model: str,
    engine: str | None = None,
    catalog: CatalogRepository = Depends(get_catalog),
):
    """Active products with a fitment covering the vehicle."""
    vehicle = VehicleSelection(year=year, make=make, model=model, engine=engine)
    products = await catalog.get_products_for_vehicle(vehicle)
    return {"vehicle": vehicle.to_dict(), "label": vehicle.label, "products": [_product_card(p) for p in products]}
