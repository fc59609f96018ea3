"""Tests for environment configuration"""
from decimal import Decimal
from unittest.mock import patch

from storefront.config import QuantityLimits, get_cart_storage_key, get_quantity_limits, get_shop_settings
from storefront.stores import CartStore, max_quantity_for


class TestQuantityLimits:
    """Tests for quantity ceilings."""

    def test_defaults(self):
        """Test defaults when nothing is set."""
        with patch.dict("os.environ", {}, clear=True):
            limits = get_quantity_limits()

        assert limits.max_meter == 100
        assert limits.max_piece == 50

    def test_env_override(self):
        """Test ceilings come from the environment."""
        env = {"MAX_METER_ORDER_QUANTITY": "25.5", "MAX_PIECE_ORDER_QUANTITY": "12"}
        with patch.dict("os.environ", env):
            limits = get_quantity_limits()

        assert limits.max_meter == Decimal("25.5")
        assert limits.max_piece == 12

    def test_invalid_env_falls_back(self):
        """Test garbage values use the default."""
        env = {"MAX_METER_ORDER_QUANTITY": "lots", "MAX_PIECE_ORDER_QUANTITY": "-3"}
        with patch.dict("os.environ", env):
            limits = get_quantity_limits()

        assert limits.max_meter == 100
        assert limits.max_piece == 50

    def test_max_for(self):
        """Test mode lookup."""
        limits = QuantityLimits(max_meter=Decimal("7"), max_piece=Decimal("3"))

        assert limits.max_for("meter") == 7
        assert limits.max_for("piece") == 3
        assert max_quantity_for("meter", limits) == 7

    def test_store_reads_env_when_not_injected(self, storage):
        """Test a store without explicit limits picks up the environment."""
        with patch.dict("os.environ", {"MAX_PIECE_ORDER_QUANTITY": "2"}):
            store = CartStore(storage=storage)

        state = store.add_item(
            {"productId": "p", "name": "x", "slug": "x", "price": 10, "sellingMode": "piece"},
            9,
        )
        assert state.items[0].quantity == 2


class TestShopSettings:
    """Tests for shipping settings."""

    def test_defaults(self):
        """Test DEFAULT_SETTINGS fallbacks."""
        with patch.dict("os.environ", {}, clear=True):
            settings = get_shop_settings()

        assert settings.shipping_free_threshold == 1000
        assert settings.shipping_base_rate == 99
        assert settings.order_min_amount == 500

    def test_env_override(self):
        """Test shipping values from the environment."""
        with patch.dict("os.environ", {"SHIPPING_BASE_RATE": "49"}):
            assert get_shop_settings().shipping_base_rate == 49


def test_storage_key():
    """Test storage key default and override."""
    with patch.dict("os.environ", {}, clear=True):
        assert get_cart_storage_key() == "naman-cart"
    with patch.dict("os.environ", {"CART_STORAGE_KEY": "dev-cart"}):
        assert get_cart_storage_key() == "dev-cart"
