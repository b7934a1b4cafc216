"""
Logging for the storefront.

Every module logs through ``get_logger(__name__)``; the root logger is set
up once on import. Cart and account code log ids through the sanitizers
below, because a guest session token is the only key to a guest cart.

    from storefront.logging import get_logger, sanitize_id_for_logging
    logger = get_logger(__name__)

    logger.info("New guest cart session %s", sanitize_id_for_logging(session_id))
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Vercel stamps each line itself
LOG_FORMAT_VERCEL = "%(levelname)s - %(name)s - %(message)s"

# Loggers of the Supabase/Upstash client stack; one line per HTTP round trip at INFO
CLIENT_STACK_LOGGERS = (
    "httpx",
    "httpcore",
    "hpack",
    "postgrest",
    "supabase",
    "supabase_auth",
    "gotrue",
    "upstash_redis",
)

ID_LOG_LENGTH = 8


def _level_from_env() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _setup() -> None:
    root = logging.getLogger()
    if root.handlers:
        # Host (pytest, uvicorn) already configured logging
        return

    level = _level_from_env()
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT_VERCEL if os.environ.get("VERCEL") == "1" else LOG_FORMAT)
    )
    root.setLevel(level)
    root.addHandler(handler)

    for name in CLIENT_STACK_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


_setup()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _neutralize(value: str) -> str:
    """Keep user-supplied text on one log line (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    First characters of a user id or guest session token.

    Enough to correlate log lines of one visitor without writing a usable
    guest cart key to the logs.
    """
    if not id_value:
        return "N/A"
    return _neutralize(str(id_value))[:ID_LOG_LENGTH]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """One-line, length-capped form of an e-mail or name."""
    if not value:
        return "N/A"
    text = _neutralize(str(value))
    return text if len(text) <= max_length else text[:max_length] + "..."


__all__ = [
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
