"""
Database Module - Supabase and Redis Clients

Provides singleton instances of:
- Async Supabase client (service role) for PostgREST tables and auth admin
- Per-request async Supabase clients (anon key) for end-user auth flows
- Upstash Redis client backing the server-side local cache
"""

from supabase._async.client import AsyncClient
from supabase._async.client import create_client as acreate_client
from upstash_redis.asyncio import Redis as AsyncRedis

from storefront import config

_async_supabase_client: AsyncClient | None = None
_redis_client: AsyncRedis | None = None


async def get_supabase() -> AsyncClient:
    """
    Get async Supabase client (singleton).

    Uses the service-role key; row-level security is bypassed, so callers
    must scope every query to the authenticated owner themselves.
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        _async_supabase_client = await acreate_client(
            config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY
        )

    return _async_supabase_client


async def create_anon_client() -> AsyncClient:
    """
    Create a fresh anon-key Supabase client.

    Sign-in stores the session on the client, so end-user auth flows get
    their own client instead of the shared service-role singleton.
    """
    if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return await acreate_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL, token=config.UPSTASH_REDIS_REST_TOKEN
        )

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    # Browser-local storage mirrored server-side, one namespace per visitor
    LOCAL = "local:"  # local:{visitor_id}:{key}

    @staticmethod
    def local_key(visitor_id: str, key: str) -> str:
        return f"{RedisKeys.LOCAL}{visitor_id}:{key}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    LOCAL_CACHE = 60 * 60 * 24 * 365  # 1 year, close to browser localStorage lifetime
