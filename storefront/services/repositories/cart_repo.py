"""Cart Repository - the ``carts`` table as the durable row store.

One row per owner: user rows are unique on ``user_id``, guest rows on
``session_id`` with ``user_id`` null.
"""

from storefront.cart.models import Cart, CartLine, CartOwner
from storefront.logging import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class CartRepository(BaseRepository):
    """Cart row operations."""

    async def get(self, owner: CartOwner) -> Cart | None:
        """Get the cart row for an owner, or None if it was never saved."""
        query = self.client.table("carts").select("items, updated_at")
        if owner.is_guest:
            query = query.eq("session_id", owner.key).is_("user_id", "null")
        else:
            query = query.eq("user_id", owner.key)
        result = await query.limit(1).execute()
        return Cart.from_row(owner, result.data[0]) if result.data else None

    async def upsert(self, owner: CartOwner, lines: list[CartLine], updated_at: str) -> None:
        """Insert or replace the owner's row. Raises on backend failure."""
        row = {
            "items": [line.to_dict() for line in lines],
            "updated_at": updated_at,
        }
        if owner.is_guest:
            row["session_id"] = owner.key
            row["user_id"] = None
        else:
            row["user_id"] = owner.key
        await (
            self.client.table("carts")
            .upsert(row, on_conflict=owner.key_column)
            .execute()
        )
