"""Cart reconciliation manager.

Keeps one in-memory line collection for the current visitor and mirrors it
into the ``carts`` row of whoever the visitor currently is: a guest session
token or an authenticated user.
"""
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from storefront.auth.identity import Identity, IdentityProvider
from storefront.cache import CART_SESSION_KEY, LocalCache
from storefront.errors import ERROR_CART_SYNC_DESCRIPTION, ERROR_CART_SYNC_TITLE
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.notifications import Notifier
from storefront.services.money import parse_price, to_decimal, to_float

from .models import CartLine, CartOwner, GuestOwner, UserOwner
from .storage import CartStore

logger = get_logger(__name__)


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SYNC_FAILED = "sync_failed"


class CartManager:
    """
    Manages the visitor's cart.

    Features:
    - Guest carts keyed by a session token kept in the local cache
    - Reload on every identity change (sign-in, sign-out)
    - Optimistic writes: memory is updated first, failed saves are reported
      but never rolled back
    - Optional carry-over of guest lines into the user cart on sign-in

    Overlapping saves are not serialized; the last upsert to complete wins.
    """

    def __init__(
        self,
        store: CartStore,
        identity: IdentityProvider,
        cache: LocalCache,
        notifier: Notifier | None = None,
        merge_guest_cart: bool = False,
    ):
        self.store = store
        self.identity = identity
        self.cache = cache
        self.notifier = notifier or Notifier()
        self.merge_guest_cart = merge_guest_cart

        self.owner: CartOwner | None = None
        self.lines: list[CartLine] = []
        self.sync_status = SyncStatus.IDLE
        self.loading = False
        self._in_flight = 0
        self._unsubscribe = None

    async def start(self) -> list[CartLine]:
        """Subscribe to identity changes and do the initial load."""
        if self._unsubscribe is None:
            self._unsubscribe = self.identity.subscribe(self._on_identity_changed)
        return await self.load()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_identity_changed(self, identity: Identity | None) -> None:
        await self.load()

    # ==================== IDENTITY ====================

    async def resolve_identity(self) -> CartOwner:
        """Work out which cart row the visitor owns right now."""
        current = self.identity.current_identity()
        if current is not None:
            owner: CartOwner = UserOwner(user_id=current.user_id)
        else:
            session_id = await self.cache.get(CART_SESSION_KEY)
            if not session_id:
                session_id = str(uuid.uuid4())
                logger.info("New guest cart session %s", sanitize_id_for_logging(session_id))
            await self.cache.set(CART_SESSION_KEY, session_id)
            owner = GuestOwner(session_id=session_id)

        self.owner = owner
        return owner

    # ==================== LOAD / PERSIST ====================

    async def load(self) -> list[CartLine]:
        """
        Replace the in-memory lines with the row of the active owner.

        Failures are logged only; the previous lines stay in place.
        """
        previous_owner = self.owner
        previous_lines = list(self.lines)
        loaded = False

        self.loading = True
        try:
            owner = await self.resolve_identity()
            cart = await self.store.get(owner)
            self.lines = list(cart.lines) if cart else []
            loaded = True
        except Exception as e:
            logger.error("Failed to load cart: %s", type(e).__name__, exc_info=True)
        finally:
            self.loading = False

        if (
            loaded
            and self.merge_guest_cart
            and isinstance(previous_owner, GuestOwner)
            and isinstance(self.owner, UserOwner)
            and previous_lines
        ):
            await self._merge_guest_lines(previous_owner, previous_lines)

        return self.lines

    async def _merge_guest_lines(self, guest_owner: GuestOwner, guest_lines: list[CartLine]) -> None:
        """Fold guest lines into the user cart, then empty the guest row so they move only once."""
        lines = list(self.lines)
        for guest_line in guest_lines:
            lines = _with_added(lines, guest_line.product_id, guest_line.quantity, guest_line.price)
        self.lines = lines
        logger.info("Merged %d guest cart lines after sign-in", len(guest_lines))
        if not await self.persist():
            return
        try:
            await self.store.upsert(guest_owner, [], datetime.now(UTC).isoformat())
        except Exception as e:
            logger.error("Failed to empty merged guest cart: %s", type(e).__name__, exc_info=True)

    async def persist(self) -> bool:
        """
        Upsert the current lines for the active owner.

        Returns False when the save failed; the user is notified and the
        in-memory lines are kept as they are.
        """
        snapshot = list(self.lines)
        self._in_flight += 1
        self.sync_status = SyncStatus.SYNCING
        try:
            owner = await self.resolve_identity()
            await self.store.upsert(owner, snapshot, datetime.now(UTC).isoformat())
        except Exception as e:
            logger.error("Failed to save cart: %s", type(e).__name__, exc_info=True)
            self._in_flight -= 1
            self.sync_status = SyncStatus.SYNC_FAILED
            self.notifier.error(ERROR_CART_SYNC_TITLE, ERROR_CART_SYNC_DESCRIPTION)
            return False

        self._in_flight -= 1
        if self._in_flight == 0:
            self.sync_status = SyncStatus.IDLE
        return True

    # ==================== MUTATIONS ====================

    async def add_line(self, product_id: str, quantity: int, price) -> list[CartLine]:
        """Add units of a product; an existing line is incremented."""
        if not product_id or not isinstance(product_id, str):
            raise ValueError("product_id must be a non-empty string")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError("quantity must be a positive integer")
        price = parse_price(price)

        self.lines = _with_added(self.lines, product_id, quantity, price)
        await self.persist()

        self.notifier.notify("Added to cart", "Item has been added to your cart.")
        return self.lines

    async def update_quantity(self, product_id: str, quantity: int) -> list[CartLine]:
        """Set a line's quantity exactly; zero or less removes the line.

        A product that is not in the cart is not added.
        """
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise ValueError("quantity must be an integer")
        if quantity <= 0:
            return await self.remove_line(product_id)

        self.lines = [
            CartLine(product_id=line.product_id, quantity=quantity, price=line.price)
            if line.product_id == product_id
            else line
            for line in self.lines
        ]
        await self.persist()
        return self.lines

    async def remove_line(self, product_id: str) -> list[CartLine]:
        self.lines = [line for line in self.lines if line.product_id != product_id]
        await self.persist()

        self.notifier.notify("Removed from cart", "Item has been removed from your cart.")
        return self.lines

    async def clear(self) -> list[CartLine]:
        self.lines = []
        await self.persist()
        return self.lines

    # ==================== AGGREGATES ====================

    def total_price(self) -> Decimal:
        return sum((line.price * line.quantity for line in self.lines), Decimal("0"))

    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    def get_line(self, product_id: str) -> CartLine | None:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def summary(self) -> dict:
        """Serialisable snapshot for API responses."""
        owner = self.owner
        return {
            "owner": {
                "type": "guest" if owner is None or owner.is_guest else "user",
                "id": owner.key if owner else None,
            },
            "items": [
                {**line.to_dict(), "total": to_float(line.total_price)}
                for line in self.lines
            ],
            "is_empty": not self.lines,
            "total_quantity": self.total_quantity(),
            "total_price": to_float(self.total_price()),
            "sync_status": self.sync_status.value,
        }


def _with_added(lines: list[CartLine], product_id: str, quantity: int, price) -> list[CartLine]:
    """Copy of ``lines`` with ``quantity`` more units of ``product_id``."""
    result = []
    found = False
    for line in lines:
        if line.product_id == product_id:
            result.append(
                CartLine(product_id=line.product_id, quantity=line.quantity + quantity, price=line.price)
            )
            found = True
        else:
            result.append(line)
    if not found:
        result.append(CartLine(product_id=product_id, quantity=quantity, price=to_decimal(price)))
    return result
