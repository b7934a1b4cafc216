"""
Tests for the cart models and reconciliation manager
"""

import random
from decimal import Decimal

import pytest

from storefront.auth.identity import Identity
from storefront.cache import CART_SESSION_KEY
from storefront.cart import Cart, CartLine, CartManager, GuestOwner, SyncStatus, UserOwner


def make_manager(cart_store, identity_provider, local_cache, notifier, **kwargs):
    return CartManager(
        store=cart_store,
        identity=identity_provider,
        cache=local_cache,
        notifier=notifier,
        **kwargs,
    )


class TestCartLine:
    """Tests for CartLine dataclass."""

    def test_price_is_decimal(self):
        line = CartLine(product_id="p1", quantity=3, price=10.1)

        assert line.price == Decimal("10.1")
        assert line.total_price == Decimal("30.30")

    def test_to_dict_matches_items_column(self):
        line = CartLine(product_id="p1", quantity=2, price=Decimal("19.99"))

        assert line.to_dict() == {"product_id": "p1", "quantity": 2, "price": 19.99}

    def test_from_dict(self):
        line = CartLine.from_dict({"product_id": "p1", "quantity": "4", "price": 5})

        assert line.quantity == 4
        assert line.price == Decimal("5")


class TestCart:
    """Tests for Cart dataclass."""

    def test_from_row_with_null_items(self):
        cart = Cart.from_row(GuestOwner("s1"), {"items": None, "updated_at": "2025-01-01T00:00:00Z"})

        assert cart.lines == []
        assert cart.total_quantity == 0
        assert cart.total_price == Decimal("0")

    def test_totals(self):
        cart = Cart(
            owner=UserOwner("u1"),
            lines=[
                CartLine(product_id="p1", quantity=2, price=10),
                CartLine(product_id="p2", quantity=1, price="4.50"),
            ],
        )

        assert cart.total_quantity == 3
        assert cart.total_price == Decimal("24.50")
        assert cart.updated_at != ""


class TestIdentityResolution:

    @pytest.mark.asyncio
    async def test_guest_session_generated_once(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)

        first = await manager.resolve_identity()
        second = await manager.resolve_identity()

        assert isinstance(first, GuestOwner)
        assert first == second
        assert await local_cache.get(CART_SESSION_KEY) == first.session_id

    @pytest.mark.asyncio
    async def test_guest_session_reused_across_visits(self, cart_store, identity_provider, local_cache, notifier):
        await local_cache.set(CART_SESSION_KEY, "existing-session")
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)

        owner = await manager.resolve_identity()

        assert owner == GuestOwner("existing-session")

    @pytest.mark.asyncio
    async def test_authenticated_owner(self, cart_store, local_cache, notifier):
        from storefront.auth.identity import SessionIdentityProvider

        provider = SessionIdentityProvider(Identity(user_id="user-1"))
        manager = make_manager(cart_store, provider, local_cache, notifier)

        owner = await manager.resolve_identity()

        assert owner == UserOwner("user-1")
        assert await local_cache.get(CART_SESSION_KEY) is None


class TestCartMutations:

    @pytest.mark.asyncio
    async def test_add_same_product_twice_increments(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.start()

        await manager.add_line("p1", 2, Decimal("10.00"))
        await manager.add_line("p1", 3, Decimal("10.00"))

        assert len(manager.lines) == 1
        assert manager.lines[0].quantity == 5
        assert [n.title for n in notifier.history] == ["Added to cart", "Added to cart"]

    @pytest.mark.asyncio
    async def test_add_persists_under_guest_session(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.start()

        await manager.add_line("p1", 1, 5)

        owner, lines, _ = cart_store.upserts[-1]
        assert owner == GuestOwner(await local_cache.get(CART_SESSION_KEY))
        assert lines[0].product_id == "p1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity, price", [
        (0, 1),
        (-1, 1),
        (True, 1),
        (1, -5),
        (1, "abc"),
        (1, None),
        (1, float("nan")),
        (1, float("inf")),
    ])
    async def test_add_rejects_invalid_input(self, quantity, price, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)

        with pytest.raises(ValueError):
            await manager.add_line("p1", quantity, price)
        assert manager.lines == []
        assert cart_store.upserts == []

    @pytest.mark.asyncio
    async def test_update_quantity_sets_exactly(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.add_line("p1", 2, 10)

        await manager.update_quantity("p1", 7)

        assert manager.get_line("p1").quantity == 7

    @pytest.mark.asyncio
    async def test_update_quantity_zero_equals_remove(self, cart_store, identity_provider, local_cache, notifier):
        updated = make_manager(cart_store, identity_provider, local_cache, notifier)
        await updated.add_line("p1", 2, 10)
        await updated.add_line("p2", 1, 3)
        removed = make_manager(cart_store, identity_provider, local_cache, notifier)
        await removed.add_line("p1", 2, 10)
        await removed.add_line("p2", 1, 3)

        await updated.update_quantity("p1", 0)
        await removed.remove_line("p1")

        assert updated.lines == removed.lines
        assert [line.product_id for line in updated.lines] == ["p2"]
        assert notifier.history[-1].title == "Removed from cart"

    @pytest.mark.asyncio
    async def test_update_quantity_missing_product_adds_nothing(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.add_line("X", 1, 10)

        await manager.update_quantity("Y", 3)

        assert manager.get_line("Y") is None
        assert len(manager.lines) == 1

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.add_line("p1", 1, 10)

        await manager.remove_line("nope")

        assert [line.product_id for line in manager.lines] == ["p1"]

    @pytest.mark.asyncio
    async def test_clear_persists_empty_cart(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.add_line("p1", 1, 10)

        await manager.clear()

        assert manager.lines == []
        assert cart_store.upserts[-1][1] == []

    @pytest.mark.asyncio
    async def test_random_sequences_keep_one_line_per_product(self, cart_store, identity_provider, local_cache, notifier):
        rng = random.Random(1234)
        products = ["a", "b", "c", "d"]
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)

        for _ in range(200):
            op = rng.choice(["add", "update", "remove"])
            product = rng.choice(products)
            if op == "add":
                await manager.add_line(product, rng.randint(1, 5), rng.choice(["1.00", "2.50"]))
            elif op == "update":
                await manager.update_quantity(product, rng.randint(-1, 6))
            else:
                await manager.remove_line(product)

            ids = [line.product_id for line in manager.lines]
            assert len(ids) == len(set(ids))
            assert all(line.quantity > 0 for line in manager.lines)
            assert manager.total_quantity() == sum(line.quantity for line in manager.lines)


class TestTotals:

    @pytest.mark.asyncio
    async def test_total_price(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)

        await manager.add_line("X", 2, Decimal("10.00"))

        assert manager.total_price() == Decimal("20.00")
        assert manager.total_quantity() == 2

    @pytest.mark.asyncio
    async def test_summary(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.add_line("X", 2, Decimal("10.00"))

        summary = manager.summary()

        assert summary["owner"]["type"] == "guest"
        assert summary["total_price"] == 20.0
        assert summary["items"][0]["total"] == 20.0
        assert summary["sync_status"] == "idle"


class TestLoadAndPersist:

    @pytest.mark.asyncio
    async def test_load_missing_row_is_empty(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)

        lines = await manager.start()

        assert lines == []
        assert manager.loading is False

    @pytest.mark.asyncio
    async def test_load_failure_is_silent(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.add_line("p1", 1, 10)
        notifier.history.clear()
        cart_store.fail_get = True

        await manager.load()

        assert [line.product_id for line in manager.lines] == ["p1"]
        assert notifier.history == []

    @pytest.mark.asyncio
    async def test_save_failure_keeps_state_and_notifies(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        cart_store.fail_upsert = True

        await manager.add_line("p1", 2, 10)

        assert manager.get_line("p1").quantity == 2
        assert manager.sync_status == SyncStatus.SYNC_FAILED
        failure = notifier.history[0]
        assert failure.title == "Cart sync failed"
        assert failure.is_error
        # The add is still confirmed to the user
        assert notifier.history[-1].title == "Added to cart"

    @pytest.mark.asyncio
    async def test_next_successful_save_resets_status(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        cart_store.fail_upsert = True
        await manager.add_line("p1", 1, 10)
        cart_store.fail_upsert = False

        assert await manager.persist() is True
        assert manager.sync_status == SyncStatus.IDLE


class TestIdentityTransitions:

    @pytest.mark.asyncio
    async def test_guest_lines_not_merged_on_sign_in(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.start()
        await manager.add_line("X", 2, Decimal("10.00"))
        assert manager.total_price() == Decimal("20.00")

        await identity_provider.set_identity(Identity(user_id="user-1"))

        assert manager.owner == UserOwner("user-1")
        assert manager.lines == []

    @pytest.mark.asyncio
    async def test_sign_in_loads_existing_user_cart(self, cart_store, identity_provider, local_cache, notifier):
        cart_store.rows[UserOwner("user-1")] = [CartLine(product_id="saved", quantity=1, price=3)]
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.start()
        await manager.add_line("X", 1, 10)

        await identity_provider.set_identity(Identity(user_id="user-1"))

        assert [line.product_id for line in manager.lines] == ["saved"]

    @pytest.mark.asyncio
    async def test_sign_out_returns_to_guest_cart(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.start()
        await manager.add_line("guest-item", 1, 10)
        session_id = await local_cache.get(CART_SESSION_KEY)

        await identity_provider.set_identity(Identity(user_id="user-1"))
        await identity_provider.set_identity(None)

        assert manager.owner == GuestOwner(session_id)
        assert [line.product_id for line in manager.lines] == ["guest-item"]

    @pytest.mark.asyncio
    async def test_opt_in_merge_carries_guest_lines(self, cart_store, identity_provider, local_cache, notifier):
        cart_store.rows[UserOwner("user-1")] = [CartLine(product_id="X", quantity=1, price=10)]
        manager = make_manager(cart_store, identity_provider, local_cache, notifier, merge_guest_cart=True)
        await manager.start()
        await manager.add_line("X", 2, 10)
        await manager.add_line("Y", 1, 5)

        await identity_provider.set_identity(Identity(user_id="user-1"))

        assert manager.get_line("X").quantity == 3
        assert manager.get_line("Y").quantity == 1
        assert cart_store.rows[UserOwner("user-1")] == manager.lines
        guest_owner = GuestOwner(await local_cache.get(CART_SESSION_KEY))
        assert cart_store.rows[guest_owner] == []

    @pytest.mark.asyncio
    async def test_merged_guest_lines_move_only_once(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier, merge_guest_cart=True)
        await manager.start()
        await manager.add_line("X", 2, 10)
        await identity_provider.set_identity(Identity(user_id="user-1"))

        await identity_provider.set_identity(None)
        assert manager.lines == []
        await identity_provider.set_identity(Identity(user_id="user-1"))

        assert manager.get_line("X").quantity == 2

    @pytest.mark.asyncio
    async def test_failed_merge_keeps_guest_row(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier, merge_guest_cart=True)
        await manager.start()
        await manager.add_line("X", 2, 10)
        guest_owner = manager.owner
        cart_store.fail_upsert = True

        await identity_provider.set_identity(Identity(user_id="user-1"))

        assert manager.sync_status == SyncStatus.SYNC_FAILED
        assert cart_store.rows[guest_owner][0].quantity == 2

    @pytest.mark.asyncio
    async def test_close_stops_following_identity(self, cart_store, identity_provider, local_cache, notifier):
        manager = make_manager(cart_store, identity_provider, local_cache, notifier)
        await manager.start()
        manager.close()

        await identity_provider.set_identity(Identity(user_id="user-1"))

        assert isinstance(manager.owner, GuestOwner)
