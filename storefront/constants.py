"""Storefront constants, enums, and static store information."""
from enum import Enum


class SellingMode(str, Enum):
    """
    How a product is sold.

    - meter: fabric cut to length, fractional quantities allowed
    - piece: whole units
    """
    METER = "meter"
    PIECE = "piece"


# Durable storage slot holding the JSON-encoded cart items
CART_STORAGE_KEY = "naman-cart"

# Increment/decrement step for cart quantity controls
QUANTITY_STEP = 1

# Quantity ceilings used when the environment does not override them
DEFAULT_MAX_METER_ORDER_QUANTITY = 100
DEFAULT_MAX_PIECE_ORDER_QUANTITY = 50

# Largest accepted unit price and line quantity; larger values are rejected
MAX_UNIT_PRICE = 10_000_000
MAX_LINE_QUANTITY = 100_000

# Stored prices keep paise, quantities keep millimeters
PRICE_PRECISION = "0.01"
QUANTITY_PRECISION = "0.001"


# Static store information
STORE_INFO: dict = {
    "name": "Naman Textiles",
    "tagline": "Premium Fabrics for Every Occasion",
    "phone": "+91 87429 09296",
    "email": "contact@namantextiles.com",
    "whatsapp": "+918742909296",
    "currency": "INR",
}

# Fallbacks for dynamic settings (checkout and cart pages)
DEFAULT_SETTINGS: dict = {
    "shipping_free_threshold": 1000,
    "shipping_base_rate": 99,
    "order_min_amount": 500,
    "cod_enabled": True,
    "online_payment_enabled": False,
}
