"""Address Repository - shipping and billing addresses of a user.

Every query is scoped by ``user_id`` as well as ``id``: the service-role
client bypasses row-level security.
"""

from datetime import UTC, datetime

from storefront.services.models import Address

from .base import BaseRepository


class AddressRepository(BaseRepository):
    """Address database operations."""

    async def list_for_user(self, user_id: str) -> list[Address]:
        result = await (
            self.client.table("addresses")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=False)
            .execute()
        )
        return [Address(**row) for row in result.data]

    async def create(self, user_id: str, data: dict) -> Address:
        row = {**data, "user_id": user_id}
        result = await self.client.table("addresses").insert(row).execute()
        return Address(**result.data[0])

    async def update(self, user_id: str, address_id: str, data: dict) -> Address | None:
        update_data = {**data, "updated_at": datetime.now(UTC).isoformat()}
        update_data.pop("user_id", None)
        result = await (
            self.client.table("addresses")
            .update(update_data)
            .eq("id", address_id)
            .eq("user_id", user_id)
            .execute()
        )
        return Address(**result.data[0]) if result.data else None

    async def delete(self, user_id: str, address_id: str) -> bool:
        result = await (
            self.client.table("addresses")
            .delete()
            .eq("id", address_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(result.data)

    async def clear_default(self, user_id: str, address_type: str) -> None:
        await (
            self.client.table("addresses")
            .update({"is_default": False})
            .eq("user_id", user_id)
            .eq("type", address_type)
            .execute()
        )
