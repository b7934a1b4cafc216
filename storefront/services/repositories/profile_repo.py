"""Profile Repository - ``profiles`` rows and the saved vehicle."""

from datetime import UTC, datetime

from storefront.logging import get_logger
from storefront.services.models import Profile

from .base import BaseRepository

logger = get_logger(__name__)

EDITABLE_PROFILE_FIELDS = ("first_name", "last_name", "phone", "avatar_url")


class ProfileRepository(BaseRepository):
    """Profile database operations."""

    async def get(self, user_id: str) -> Profile | None:
        result = await self.client.table("profiles").select("*").eq("id", user_id).limit(1).execute()
        return Profile(**result.data[0]) if result.data else None

    async def update(self, user_id: str, **fields) -> Profile | None:
        """Update editable fields; returns the stored row, or None if there is none."""
        update_data = {k: v for k, v in fields.items() if k in EDITABLE_PROFILE_FIELDS}
        update_data["updated_at"] = datetime.now(UTC).isoformat()
        result = await (
            self.client.table("profiles")
            .update(update_data)
            .eq("id", user_id)
            .execute()
        )
        return Profile(**result.data[0]) if result.data else None

    async def update_saved_vehicle(self, user_id: str, vehicle: dict | None) -> None:
        await (
            self.client.table("profiles")
            .update({"saved_vehicle": vehicle, "updated_at": datetime.now(UTC).isoformat()})
            .eq("id", user_id)
            .execute()
        )
