"""Sign-up, sign-in (with the admin-only variant), and sign-out over Supabase Auth."""
from dataclasses import dataclass
from typing import Any

from storefront.errors import AdminAccessDenied, describe_error
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.notifications import Notifier
from storefront.services.models import AppRole
from storefront.services.repositories import RoleRepository

from .identity import Identity, SessionIdentityProvider

logger = get_logger(__name__)


@dataclass
class AuthResult:
    """Outcome of an auth call; ``error`` is None on success."""
    error: Exception | None = None
    user_id: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AuthService:
    """
    Auth flows for one client.

    Failures never raise: they come back in ``AuthResult.error`` and are
    shown to the user as a notification.
    """

    def __init__(
        self,
        client,
        identity: SessionIdentityProvider,
        notifier: Notifier | None = None,
        roles: RoleRepository | None = None,
    ) -> None:
        self.client = client
        self.identity = identity
        self.notifier = notifier or Notifier()
        self.roles = roles or RoleRepository(client)

    async def sign_up(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        redirect_url: str | None = None,
    ) -> AuthResult:
        try:
            options: dict[str, Any] = {"data": {"first_name": first_name, "last_name": last_name}}
            if redirect_url:
                options["email_redirect_to"] = redirect_url
            response = await self.client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except Exception as e:
            logger.warning(
                "Sign up failed for %s: %s", sanitize_string_for_logging(email), type(e).__name__
            )
            self.notifier.error("Sign up failed", describe_error(e))
            return AuthResult(error=e)

        self.notifier.notify(
            "Check your email",
            "We've sent you a confirmation link to complete your registration.",
        )
        user = getattr(response, "user", None)
        return AuthResult(user_id=user.id if user else None)

    async def sign_in(self, email: str, password: str, is_admin_login: bool = False) -> AuthResult:
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
            user = response.user

            if is_admin_login and user:
                if not await self.roles.has_role(user.id, AppRole.ADMIN):
                    await self.client.auth.sign_out()
                    raise AdminAccessDenied()
        except Exception as e:
            logger.warning(
                "Sign in failed for %s: %s", sanitize_string_for_logging(email), type(e).__name__
            )
            self.notifier.error("Sign in failed", describe_error(e))
            return AuthResult(error=e)

        session = response.session
        if user:
            await self.identity.set_identity(Identity(user_id=user.id, email=getattr(user, "email", None)))
        self.notifier.notify("Welcome back!", "You have been signed in successfully.")
        return AuthResult(
            user_id=user.id if user else None,
            access_token=getattr(session, "access_token", None),
            refresh_token=getattr(session, "refresh_token", None),
        )

    async def sign_out(self, access_token: str | None = None) -> AuthResult:
        """Sign out this client's session, or revoke ``access_token`` via the admin API."""
        try:
            if access_token:
                await self.client.auth.admin.sign_out(access_token)
            else:
                await self.client.auth.sign_out()
        except Exception as e:
            logger.warning("Sign out failed: %s", type(e).__name__)
            self.notifier.error("Sign out failed", describe_error(e))
            return AuthResult(error=e)

        await self.identity.set_identity(None)
        self.notifier.notify("Signed out", "You have been signed out successfully.")
        return AuthResult()
