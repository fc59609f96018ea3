"""
Storefront configuration.

Values are read from the environment at call time so tests can override
them with patch.dict("os.environ", ...).

Environment variables:
- MAX_METER_ORDER_QUANTITY / MAX_PIECE_ORDER_QUANTITY: cart quantity ceilings
- CART_STORAGE_KEY: durable storage slot for the cart
- CART_STORAGE_BACKEND: memory | file | redis
- CART_STORAGE_PATH: JSON file used by the file backend
- UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN: redis backend
- SHIPPING_FREE_THRESHOLD / SHIPPING_BASE_RATE / ORDER_MIN_AMOUNT
"""
import os
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from .constants import (
    CART_STORAGE_KEY,
    DEFAULT_MAX_METER_ORDER_QUANTITY,
    DEFAULT_MAX_PIECE_ORDER_QUANTITY,
    DEFAULT_SETTINGS,
    MAX_LINE_QUANTITY,
    MAX_UNIT_PRICE,
    QUANTITY_PRECISION,
    SellingMode,
)
from .logging import get_logger
from .money import to_quantity

logger = get_logger(__name__)

STORAGE_BACKENDS = ("memory", "file", "redis")
DEFAULT_STORAGE_PATH = ".storefront/storage.json"


@dataclass(frozen=True)
class QuantityLimits:
    """Per selling mode quantity ceilings."""
    max_meter: Decimal = Decimal(DEFAULT_MAX_METER_ORDER_QUANTITY)
    max_piece: Decimal = Decimal(DEFAULT_MAX_PIECE_ORDER_QUANTITY)

    def max_for(self, selling_mode: str) -> Decimal:
        if selling_mode == SellingMode.METER.value:
            return self.max_meter
        return self.max_piece


@dataclass(frozen=True)
class ShopSettings:
    """Shipping and order thresholds used by the cart summary."""
    shipping_free_threshold: Decimal = Decimal(DEFAULT_SETTINGS["shipping_free_threshold"])
    shipping_base_rate: Decimal = Decimal(DEFAULT_SETTINGS["shipping_base_rate"])
    order_min_amount: Decimal = Decimal(DEFAULT_SETTINGS["order_min_amount"])


def _env_decimal(name: str, default: int, maximum: int = MAX_UNIT_PRICE) -> Decimal:
    """Read a positive number from the environment, falling back on bad input."""
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return Decimal(default)
    value = to_quantity(raw.strip())
    if value is None or value < 0 or value > maximum:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return Decimal(default)
    return value


def _env_ceiling(name: str, default: int) -> Decimal:
    # Ceilings sit on the stored quantity grid so clamped lines never round past them
    value = _env_decimal(name, default, maximum=MAX_LINE_QUANTITY)
    return value.quantize(Decimal(QUANTITY_PRECISION), rounding=ROUND_DOWN)


def get_quantity_limits() -> QuantityLimits:
    """Build quantity ceilings from MAX_METER_ORDER_QUANTITY / MAX_PIECE_ORDER_QUANTITY."""
    return QuantityLimits(
        max_meter=_env_ceiling("MAX_METER_ORDER_QUANTITY", DEFAULT_MAX_METER_ORDER_QUANTITY),
        max_piece=_env_ceiling("MAX_PIECE_ORDER_QUANTITY", DEFAULT_MAX_PIECE_ORDER_QUANTITY),
    )


def get_shop_settings() -> ShopSettings:
    """Shipping settings, environment first, DEFAULT_SETTINGS otherwise."""
    return ShopSettings(
        shipping_free_threshold=_env_decimal(
            "SHIPPING_FREE_THRESHOLD", DEFAULT_SETTINGS["shipping_free_threshold"]
        ),
        shipping_base_rate=_env_decimal(
            "SHIPPING_BASE_RATE", DEFAULT_SETTINGS["shipping_base_rate"]
        ),
        order_min_amount=_env_decimal(
            "ORDER_MIN_AMOUNT", DEFAULT_SETTINGS["order_min_amount"]
        ),
    )


def get_cart_storage_key() -> str:
    return os.environ.get("CART_STORAGE_KEY") or CART_STORAGE_KEY


def get_storage_backend() -> str:
    """Storage backend name; unknown values fall back to memory."""
    backend = os.environ.get("CART_STORAGE_BACKEND", "memory").strip().lower()
    if backend not in STORAGE_BACKENDS:
        logger.warning(f"Unknown CART_STORAGE_BACKEND={backend!r}, using memory")
        return "memory"
    return backend


def get_storage_path() -> str:
    return os.environ.get("CART_STORAGE_PATH") or DEFAULT_STORAGE_PATH


def get_redis_config() -> dict:
    """Upstash REST credentials (standard env var names)."""
    return {
        "url": os.environ.get("UPSTASH_REDIS_REST_URL", ""),
        "token": os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
    }
