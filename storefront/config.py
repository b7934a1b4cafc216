"""Environment-driven settings shared across the storefront."""
import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Where e-mail confirmation links land after sign-up
SITE_URL = os.environ.get("SITE_URL", "http://localhost:8080")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", SITE_URL).split(",")
    if origin.strip()
]

# Guest lines are abandoned on sign-in unless this is enabled
CART_MERGE_GUEST_ON_SIGN_IN = _env_flag("CART_MERGE_GUEST_ON_SIGN_IN")


def get_service_role_key() -> str:
    """Read the service-role key at call time (tests patch the environment)."""
    return os.environ.get("SUPABASE_SERVICE_ROLE_KEY", SUPABASE_SERVICE_ROLE_KEY)
