"""Pytest configuration and fixtures"""
import os

import pytest
from unittest.mock import AsyncMock, Mock

# Set test environment variables before storefront.config is imported
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_service_key")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("SITE_URL", "https://shop.test")

from storefront.auth.identity import SessionIdentityProvider  # noqa: E402
from storefront.cache import MemoryLocalCache  # noqa: E402
from storefront.cart.models import Cart  # noqa: E402
from storefront.notifications import Notifier  # noqa: E402

QUERY_METHODS = (
    "select", "insert", "update", "delete", "upsert",
    "eq", "is_", "in_", "limit", "order", "gte", "lte",
)


class FakeCartStore:
    """In-memory durable row store keyed by owner."""

    def __init__(self):
        self.rows = {}
        self.upserts = []
        self.fail_get = False
        self.fail_upsert = False

    async def get(self, owner):
        if self.fail_get:
            raise ConnectionError("carts table unavailable")
        lines = self.rows.get(owner)
        if lines is None:
            return None
        return Cart(owner=owner, lines=list(lines))

    async def upsert(self, owner, lines, updated_at):
        if self.fail_upsert:
            raise ConnectionError("carts table unavailable")
        self.rows[owner] = list(lines)
        self.upserts.append((owner, list(lines), updated_at))


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client.

    Every query builder call returns the same table mock, so a test sets
    ``client.table.return_value.execute.return_value.data`` for the result.
    """
    client = Mock()

    table_mock = Mock()
    for name in QUERY_METHODS:
        getattr(table_mock, name).return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock

    client.auth = Mock()
    client.auth.sign_up = AsyncMock()
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_out = AsyncMock()
    client.auth.get_user = AsyncMock()
    client.auth.admin.update_user_by_id = AsyncMock()
    client.auth.admin.sign_out = AsyncMock()

    return client


@pytest.fixture
def cart_store():
    return FakeCartStore()


@pytest.fixture
def local_cache():
    return MemoryLocalCache()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def identity_provider():
    return SessionIdentityProvider()


@pytest.fixture
def sample_profile():
    """Sample profile row"""
    return {
        "id": "user-123",
        "first_name": "Dana",
        "last_name": "Reyes",
        "phone": "+1 555 0100",
        "avatar_url": None,
        "saved_vehicle": None,
        "created_at": "2025-01-01T00:00:00Z",
        "updated_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def sample_address():
    """Sample address row"""
    return {
        "id": "addr-1",
        "user_id": "user-123",
        "type": "shipping",
        "first_name": "Dana",
        "last_name": "Reyes",
        "company": None,
        "address_line_1": "12 Main St",
        "address_line_2": None,
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
        "phone": None,
        "is_default": None,
    }


@pytest.fixture
def sample_product():
    """Sample product row"""
    return {
        "id": "prod-brake-1",
        "title": "Ceramic Brake Pads",
        "slug": "ceramic-brake-pads",
        "sku": "BP-1001",
        "price": 49.99,
        "sale_price": None,
        "stock": 12,
        "images": ["https://cdn.test/bp.jpg"],
        "rating": 4.5,
        "rating_count": 18,
        "is_featured": True,
        "is_active": True,
        "brand": {"name": "StopTech"},
        "category": {"name": "Brakes"},
    }
