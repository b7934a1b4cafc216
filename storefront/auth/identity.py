"""
Authenticated-identity signal.

Cart and account code never read auth state from a global: they receive an
identity provider, ask it for the current identity and subscribe to changes.
"""
import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from storefront.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """A signed-in user."""
    user_id: str
    email: str | None = None


IdentityCallback = Callable[[Identity | None], Awaitable[None] | None]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    def current_identity(self) -> Identity | None: ...

    def subscribe(self, callback: IdentityCallback) -> Unsubscribe: ...


class SessionIdentityProvider:
    """
    In-process identity holder.

    ``set_identity`` is called by the auth service after sign-in/sign-out;
    ``bind`` additionally follows GoTrue ``on_auth_state_change`` events
    (token refreshes, sign-outs elsewhere). Subscribers run only when the
    user actually changes.
    """

    def __init__(self, identity: Identity | None = None) -> None:
        self._identity = identity
        self._subscribers: list[IdentityCallback] = []
        self._subscription: Any = None
        self._pending: set[asyncio.Task] = set()

    def current_identity(self) -> Identity | None:
        return self._identity

    def subscribe(self, callback: IdentityCallback) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def set_identity(self, identity: Identity | None) -> None:
        previous = self._identity
        if _same_user(previous, identity):
            self._identity = identity
            return

        self._identity = identity
        logger.info(
            "Identity changed: %s -> %s",
            sanitize_id_for_logging(previous.user_id if previous else None),
            sanitize_id_for_logging(identity.user_id if identity else None),
        )
        for callback in list(self._subscribers):
            result = callback(identity)
            if inspect.isawaitable(result):
                await result

    def bind(self, client) -> None:
        """Follow auth state changes of a Supabase client."""
        self._subscription = client.auth.on_auth_state_change(self._on_auth_state_change)

    def unbind(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_auth_state_change(self, event, session) -> None:
        user = getattr(session, "user", None) if session else None
        identity = Identity(user_id=user.id, email=getattr(user, "email", None)) if user else None
        # GoTrue fires this callback synchronously from inside its own coroutine
        task = asyncio.get_running_loop().create_task(self.set_identity(identity))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


def _same_user(a: Identity | None, b: Identity | None) -> bool:
    if a is None or b is None:
        return a is b
    return a.user_id == b.user_id
