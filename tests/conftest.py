"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Keep tests on in-memory storage regardless of the developer's shell
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from storefront.config import QuantityLimits, ShopSettings
from storefront.storage import MemoryStorage
from storefront.stores import CartProduct, CartStore, UIStore


@pytest.fixture
def limits():
    """Small ceilings so clamping is easy to reach"""
    return QuantityLimits(max_meter=Decimal("10"), max_piece=Decimal("5"))


@pytest.fixture
def shop_settings():
    """Shipping settings matching the store defaults"""
    return ShopSettings(
        shipping_free_threshold=Decimal("1000"),
        shipping_base_rate=Decimal("99"),
        order_min_amount=Decimal("500"),
    )


@pytest.fixture
def storage():
    """Fresh in-memory durable storage"""
    return MemoryStorage()


@pytest.fixture
def cart_store(storage, limits):
    """Cart store over in-memory storage"""
    return CartStore(storage=storage, limits=limits)


@pytest.fixture
def ui_store():
    return UIStore()


@pytest.fixture
def piece_product():
    """Cushion cover sold per piece"""
    return CartProduct(
        product_id="prod-cushion",
        name="Silk Cushion Cover",
        slug="silk-cushion-cover",
        price=Decimal("250"),
        selling_mode="piece",
        min_order_quantity=Decimal("1"),
        image="https://cdn.example.com/cushion.jpg",
    )


@pytest.fixture
def meter_product():
    """Cotton fabric sold per meter, minimum 2 meters"""
    return CartProduct(
        product_id="prod-cotton",
        name="Cotton Cambric",
        slug="cotton-cambric",
        price=Decimal("120.50"),
        selling_mode="meter",
        min_order_quantity=Decimal("2"),
    )


@pytest.fixture
def sample_item_payload():
    """Stored line as the web client writes it"""
    return {
        "productId": "prod-brocade",
        "name": "Banarsi Brocade",
        "slug": "banarsi-brocade",
        "image": "https://cdn.example.com/brocade.jpg",
        "price": 899,
        "quantity": 2.5,
        "sellingMode": "meter",
        "minOrderQuantity": 1,
    }
