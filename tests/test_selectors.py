"""Tests for the selector bridge and deep equality"""
from dataclasses import dataclass
from decimal import Decimal
from unittest.mock import Mock

from storefront.constants import SellingMode
from storefront.equality import deep_equal
from storefront.selectors import Selection, select
from storefront.stores import CartStore


@dataclass
class Point:
    x: int
    y: int


class TestDeepEqual:
    """Tests for structural comparison."""

    def test_nested_structures(self):
        """Test nested dicts and lists compare by value."""
        a = {"items": [{"id": "a", "qty": 1}], "open": False}
        b = {"items": [{"id": "a", "qty": 1}], "open": False}

        assert deep_equal(a, b)
        assert not deep_equal(a, {"items": [{"id": "a", "qty": 2}], "open": False})

    def test_dataclasses(self):
        """Test dataclasses compare field by field."""
        assert deep_equal(Point(1, 2), Point(1, 2))
        assert not deep_equal(Point(1, 2), Point(2, 1))
        assert not deep_equal(Point(1, 2), {"x": 1, "y": 2})

    def test_sequences(self):
        """Test length and order matter, list and tuple differ."""
        assert deep_equal((1, 2), (1, 2))
        assert not deep_equal([1, 2], [2, 1])
        assert not deep_equal([1, 2], [1, 2, 3])
        assert not deep_equal([1, 2], (1, 2))

    def test_bool_vs_number(self):
        """Test booleans never equal numbers."""
        assert not deep_equal(True, 1)
        assert not deep_equal(0, False)
        assert deep_equal(True, True)

    def test_numbers_and_nan(self):
        """Test numeric equality across types and NaN."""
        assert deep_equal(Decimal("2.50"), Decimal("2.5"))
        assert deep_equal(3, 3.0)
        assert deep_equal(float("nan"), float("nan"))

    def test_enum_matches_value(self):
        """Test enum members compare by value."""
        assert deep_equal(SellingMode.METER, "meter")

    def test_mapping_keys(self):
        """Test missing keys are detected."""
        assert not deep_equal({"a": 1}, {"b": 1})
        assert not deep_equal({"a": 1}, [("a", 1)])


class TestSelection:
    """Tests for value-compared subscriptions."""

    def test_value_before_any_update(self, cart_store):
        """Test the projection is available before the store emits."""
        selection = Selection(cart_store, lambda s: s.item_count)

        assert selection.value == 0

    def test_delivers_on_change(self, cart_store, piece_product):
        """Test subscribers see a changed projection."""
        selection = Selection(cart_store, lambda s: s.item_count)
        callback = Mock()
        selection.subscribe(callback)

        cart_store.add_item(piece_product, 1)

        callback.assert_called_once_with(1)
        assert selection.value == 1

    def test_skips_deep_equal_projection(self, cart_store, piece_product):
        """Test events that rebuild but do not change the slice are not delivered."""
        cart_store.add_item(piece_product, 1)
        selection = Selection(cart_store, lambda s: [i.to_dict() for i in s.items])
        callback = Mock()
        selection.subscribe(callback)

        cart_store.toggle_cart()
        cart_store.set_loading(True)
        cart_store.update_quantity("missing", 3)

        callback.assert_not_called()

    def test_reference_compare_would_fire(self, cart_store):
        """Test a custom identity compare fires on every event."""
        selection = Selection(cart_store, lambda s: s, compare=lambda a, b: a is b)
        callback = Mock()
        selection.subscribe(callback)

        cart_store.open_cart()
        cart_store.open_cart()

        assert callback.call_count == 2

    def test_unsubscribe(self, cart_store, piece_product):
        """Test an unsubscribed callback is not called."""
        selection = Selection(cart_store, lambda s: s.item_count)
        callback = Mock()
        unsubscribe = selection.subscribe(callback)
        unsubscribe()

        cart_store.add_item(piece_product, 1)

        callback.assert_not_called()

    def test_close_reads_store_directly(self, cart_store, piece_product):
        """Test a closed selection still returns the live projection."""
        selection = Selection(cart_store, lambda s: s.item_count)
        callback = Mock()
        selection.subscribe(callback)
        selection.close()

        cart_store.add_item(piece_product, 1)

        callback.assert_not_called()
        assert selection.value == 1

    def test_failing_callback_is_contained(self, cart_store, piece_product):
        """Test one failing subscriber does not block the others or the store."""
        selection = Selection(cart_store, lambda s: s.item_count)
        good = Mock()
        selection.subscribe(Mock(side_effect=RuntimeError("boom")))
        selection.subscribe(good)

        state = cart_store.add_item(piece_product, 1)

        assert state.item_count == 1
        good.assert_called_once_with(1)

    def test_works_for_ui_store(self, ui_store):
        """Test the bridge is store-agnostic."""
        selection = Selection(ui_store, lambda s: s.active_modal)
        callback = Mock()
        selection.subscribe(callback)

        ui_store.open_search()
        ui_store.open_modal("login")

        callback.assert_called_once_with("login")

    def test_select_helper(self, storage, limits, piece_product):
        """Test one-off projection."""
        store = CartStore(storage=storage, limits=limits)
        store.add_item(piece_product, 2)

        assert select(store, lambda s: s.items[0].quantity) == 2
