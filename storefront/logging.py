"""
Logging setup for the storefront service.

Usage:
    from storefront.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart hydrated")
    logger.warning("Failed to persist cart", exc_info=True)

Environment:
- LOG_LEVEL: root level (default INFO)
- STOREFRONT_LOG_LEVEL: level for storefront.* only, e.g. DEBUG to trace
  every store event without the HTTP client noise
- STOREFRONT_ENV=production: logfmt lines without timestamps (the platform
  log collector stamps them)
"""

import logging
import os
import sys
from functools import cache

SERVICE_LOGGER = "storefront"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_FORMAT_PRODUCTION = "level=%(levelname)s logger=%(name)s msg=%(message)s"

# Chatty dependencies: the Upstash client logs every REST call through httpx
QUIET_LOGGERS = ("httpx", "httpcore", "upstash_redis")

# Control characters (C0 and DEL) rendered visibly instead of breaking lines
_CONTROL_ESCAPES = {code: f"\\x{code:02x}" for code in [*range(0x20), 0x7F]}
_CONTROL_ESCAPES.update({ord("\n"): "\\n", ord("\r"): "\\r", ord("\t"): "\\t"})


def _level_from_env(name: str, default: str) -> int:
    level_name = os.environ.get(name, default).upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_logging() -> None:
    root = logging.getLogger()

    # Leave an embedding server's configuration alone
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        is_production = os.environ.get("STOREFRONT_ENV") == "production"
        handler.setFormatter(logging.Formatter(LOG_FORMAT_PRODUCTION if is_production else LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(_level_from_env("LOG_LEVEL", "INFO"))

    service_level = os.environ.get("STOREFRONT_LOG_LEVEL")
    if service_level:
        logging.getLogger(SERVICE_LOGGER).setLevel(_level_from_env("STOREFRONT_LOG_LEVEL", service_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a storefront module (pass __name__)."""
    return logging.getLogger(name)


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """
    Make client-supplied text safe for a single log line.

    Control characters are escaped so a value cannot forge extra lines
    (CWE-117), and long values are truncated with "...".
    """
    if not value:
        return "N/A"
    safe_value = str(value).translate(_CONTROL_ESCAPES)
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Product ids are public catalog data, so they are escaped but kept whole up to 40 chars."""
    return sanitize_string_for_logging(id_value, max_length=40)


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_PRODUCTION",
    "QUIET_LOGGERS",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
