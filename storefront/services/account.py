"""Account service: profile, saved vehicle, and addresses of the signed-in user."""

from pydantic import ValidationError

from storefront.auth.identity import IdentityProvider
from storefront.errors import NotAuthenticated, describe_error
from storefront.logging import get_logger
from storefront.notifications import Notifier
from storefront.services.models import Address, Profile
from storefront.services.repositories import AddressRepository, ProfileRepository
from storefront.vehicle.models import VehicleSelection

logger = get_logger(__name__)


class AccountService:
    """
    Account operations for whoever the identity provider says is signed in.

    Mutation failures are logged, shown to the user, and re-raised so the
    caller can stop. ``save_vehicle`` is the exception: it runs as the
    vehicle selector callback and must not abort the local save.
    """

    def __init__(
        self,
        profiles: ProfileRepository,
        addresses: AddressRepository,
        identity: IdentityProvider,
        notifier: Notifier | None = None,
    ) -> None:
        self.profiles = profiles
        self.addresses = addresses
        self.identity = identity
        self.notifier = notifier or Notifier()

    def _user_id(self) -> str:
        current = self.identity.current_identity()
        if current is None:
            raise NotAuthenticated()
        return current.user_id

    # ==================== PROFILE ====================

    async def get_profile(self) -> Profile | None:
        return await self.profiles.get(self._user_id())

    async def update_profile(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> Profile | None:
        user_id = self._user_id()
        try:
            profile = await self.profiles.update(
                user_id, first_name=first_name, last_name=last_name, phone=phone
            )
        except Exception as e:
            logger.error("Error saving profile: %s", type(e).__name__, exc_info=True)
            self.notifier.error("Error", f"Failed to update profile: {describe_error(e)}")
            raise

        if profile is not None:
            self.notifier.notify("Profile updated!", "Your profile information has been saved.")
        return profile

    async def save_vehicle(self, vehicle: VehicleSelection | None) -> bool:
        """Mirror the selector's vehicle into the profile. Guests are skipped."""
        current = self.identity.current_identity()
        if current is None:
            return False
        try:
            await self.profiles.update_saved_vehicle(
                current.user_id, vehicle.to_dict() if vehicle else None
            )
        except Exception as e:
            logger.error("Error saving vehicle to profile: %s", type(e).__name__, exc_info=True)
            self.notifier.error("Error", f"Failed to save vehicle: {describe_error(e)}")
            return False
        return True

    async def get_saved_vehicle(self) -> VehicleSelection | None:
        """Saved vehicle from the profile, if it is complete."""
        profile = await self.get_profile()
        if profile is None or not profile.saved_vehicle:
            return None
        data = profile.saved_vehicle
        if not (data.get("year") and data.get("make") and data.get("model")):
            return None
        try:
            return VehicleSelection(**data)
        except ValidationError as e:
            logger.warning("Ignoring malformed saved vehicle: %d errors", e.error_count())
            return None

    # ==================== ADDRESSES ====================

    async def list_addresses(self) -> list[Address]:
        return await self.addresses.list_for_user(self._user_id())

    async def create_address(self, data: dict) -> Address:
        user_id = self._user_id()
        try:
            if data.get("is_default"):
                await self.addresses.clear_default(user_id, data["type"])
            address = await self.addresses.create(user_id, data)
        except Exception as e:
            logger.error("Error creating address: %s", type(e).__name__, exc_info=True)
            self.notifier.error("Error", f"Failed to add address: {describe_error(e)}")
            raise

        self.notifier.notify("Address added", "Your address has been saved.")
        return address

    async def update_address(self, address_id: str, data: dict) -> Address | None:
        user_id = self._user_id()
        try:
            if data.get("is_default") and data.get("type"):
                await self.addresses.clear_default(user_id, data["type"])
            address = await self.addresses.update(user_id, address_id, data)
        except Exception as e:
            logger.error("Error updating address: %s", type(e).__name__, exc_info=True)
            self.notifier.error("Error", f"Failed to update address: {describe_error(e)}")
            raise

        if address is not None:
            self.notifier.notify("Address updated", "Your address has been saved.")
        return address

    async def set_default_address(self, address_id: str) -> Address | None:
        """Make one address the default of its type."""
        user_id = self._user_id()
        existing = next(
            (a for a in await self.addresses.list_for_user(user_id) if a.id == address_id),
            None,
        )
        if existing is None:
            return None
        return await self.update_address(address_id, {"type": existing.type, "is_default": True})

    async def delete_address(self, address_id: str) -> bool:
        user_id = self._user_id()
        try:
            deleted = await self.addresses.delete(user_id, address_id)
        except Exception as e:
            logger.error("Error deleting address: %s", type(e).__name__, exc_info=True)
            self.notifier.error("Error", f"Failed to delete address: {describe_error(e)}")
            raise

        if deleted:
            self.notifier.notify("Address removed", "Your address has been deleted.")
        return deleted
