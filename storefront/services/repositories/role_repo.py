"""Role Repository - ``user_roles`` membership."""

from storefront.services.models import AppRole

from .base import BaseRepository


class RoleRepository(BaseRepository):
    """Role database operations."""

    async def has_role(self, user_id: str, role: AppRole) -> bool:
        result = await (
            self.client.table("user_roles")
            .select("role")
            .eq("user_id", user_id)
            .eq("role", role.value)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    async def get_any(self, user_id: str) -> dict | None:
        """Any role row of the user (a user holds at most one)."""
        result = await (
            self.client.table("user_roles")
            .select("id, role")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    async def insert(self, user_id: str, role: AppRole) -> list[dict]:
        result = await (
            self.client.table("user_roles")
            .insert({"user_id": user_id, "role": role.value})
            .execute()
        )
        return result.data
