"""Catalog Repository - products, categories, and vehicle fitments.

Catalog reads degrade to empty lists: a storefront page renders without
the section rather than failing.
"""

from storefront.logging import get_logger
from storefront.services.models import Category, Fitment, Product
from storefront.vehicle.models import VehicleSelection

from .base import BaseRepository

logger = get_logger(__name__)

FEATURED_LIMIT = 8
ROOT_CATEGORIES_LIMIT = 6


class CatalogRepository(BaseRepository):
    """Read-only catalog queries."""

    async def get_featured_products(self, limit: int = FEATURED_LIMIT) -> list[Product]:
        try:
            result = await (
                self.client.table("products")
                .select("*, brand:brands(name), category:categories(name)")
                .eq("is_featured", True)
                .eq("is_active", True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error("Failed to load featured products: %s", type(e).__name__, exc_info=True)
            return []
        return [Product(**row) for row in result.data]

    async def get_root_categories(self, limit: int = ROOT_CATEGORIES_LIMIT) -> list[Category]:
        try:
            result = await (
                self.client.table("categories")
                .select("*")
                .is_("parent_id", "null")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error("Failed to load categories: %s", type(e).__name__, exc_info=True)
            return []
        return [Category(**row) for row in result.data]

    async def get_product(self, product_id: str) -> Product | None:
        result = await (
            self.client.table("products")
            .select("*")
            .eq("id", product_id)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        return Product(**result.data[0]) if result.data else None

    async def get_fitments(self, vehicle: VehicleSelection) -> list[Fitment]:
        """Fitment rows covering the vehicle's year, make and model.

        Rows without an engine fit every engine.
        """
        result = await (
            self.client.table("fitments")
            .select("*")
            .eq("make", vehicle.make)
            .eq("model", vehicle.model)
            .lte("year_from", vehicle.year)
            .gte("year_to", vehicle.year)
            .execute()
        )
        fitments = [Fitment(**row) for row in result.data]
        if vehicle.engine:
            fitments = [f for f in fitments if not f.engine or f.engine == vehicle.engine]
        return fitments

    async def get_products_for_vehicle(self, vehicle: VehicleSelection) -> list[Product]:
        try:
            fitments = await self.get_fitments(vehicle)
            product_ids = sorted({f.product_id for f in fitments})
            if not product_ids:
                return []
            result = await (
                self.client.table("products")
                .select("*")
                .in_("id", product_ids)
                .eq("is_active", True)
                .execute()
            )
        except Exception as e:
            logger.error("Failed to load products for vehicle: %s", type(e).__name__, exc_info=True)
            return []
        return [Product(**row) for row in result.data]
