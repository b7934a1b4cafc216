"""Durable row store contract for carts.

Implemented by ``storefront.services.repositories.CartRepository``.
"""
from typing import Protocol

from .models import Cart, CartLine, CartOwner


class CartStore(Protocol):
    async def get(self, owner: CartOwner) -> Cart | None: ...

    async def upsert(self, owner: CartOwner, lines: list[CartLine], updated_at: str) -> None: ...


__all__ = ["CartStore"]
