"""Role assignment.

The only path that grants elevated privilege. Runs with the service-role
client; a user who already holds a role is left unchanged.
"""
from storefront.errors import MESSAGE_ROLE_ALREADY_SET
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.models import AppRole
from storefront.services.repositories import RoleRepository

logger = get_logger(__name__)


async def assign_role(client, user_id: str, role: AppRole) -> dict:
    """
    Give ``user_id`` the role and mirror it into the auth user's app_metadata.

    Returns the inserted ``user_roles`` rows, or ``{"message": "Role already set"}``
    when the user already has a role. Backend errors propagate.
    """
    roles = RoleRepository(client)

    existing = await roles.get_any(user_id)
    if existing:
        logger.info("Role already set for user %s", sanitize_id_for_logging(user_id))
        return {"message": MESSAGE_ROLE_ALREADY_SET}

    inserted = await roles.insert(user_id, role)
    await client.auth.admin.update_user_by_id(user_id, {"app_metadata": {"role": role.value}})

    logger.info("Assigned role %s to user %s", role.value, sanitize_id_for_logging(user_id))
    return inserted
