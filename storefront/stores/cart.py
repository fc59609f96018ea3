"""
Cart store with quantity bounds and durable persistence.

Features:
- Lines are unique by product_id; adding an existing product merges quantity
- Quantities stay within [min_order_quantity, ceiling for the selling mode]
- Decrementing below the minimum removes the line
- Every item change is written to durable storage before the call returns
- Drawer visibility and the loading flag are session-only

No operation raises: bad input is clamped or ignored and storage failures
are logged, leaving the in-memory cart authoritative.
"""
import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

from storefront.config import QuantityLimits, ShopSettings, get_quantity_limits, get_shop_settings
from storefront.constants import (
    CART_STORAGE_KEY,
    MAX_LINE_QUANTITY,
    MAX_UNIT_PRICE,
    PRICE_PRECISION,
    QUANTITY_PRECISION,
    QUANTITY_STEP,
    SellingMode,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.money import multiply, round_money, to_quantity
from storefront.storage import KeyValueStorage, MemoryStorage
from .base import Store

logger = get_logger(__name__)

STEP = Decimal(QUANTITY_STEP)


def _coerce_selling_mode(value: Any) -> str:
    if isinstance(value, SellingMode):
        return value.value
    try:
        return SellingMode(value).value
    except ValueError:
        raise ValueError(f"Unknown selling mode: {value!r}")


def _require_number(value: Any, name: str, limit: int, precision: str) -> Decimal:
    """Validate a stored price or quantity and snap it to its storage grid."""
    number = to_quantity(value)
    if number is None or number < 0:
        raise ValueError(f"{name} must be a non-negative number")
    if number > limit:
        raise ValueError(f"{name} must not exceed {limit}")
    return number.quantize(Decimal(precision), rounding=ROUND_HALF_UP)


def _require_price(value: Any) -> Decimal:
    return _require_number(value, "price", MAX_UNIT_PRICE, PRICE_PRECISION)


def _require_quantity(value: Any, name: str = "quantity") -> Decimal:
    return _require_number(value, name, MAX_LINE_QUANTITY, QUANTITY_PRECISION)


def _requested_quantity(value: Any) -> Optional[Decimal]:
    """
    Parse a requested quantity, capping its magnitude.

    Anything past MAX_LINE_QUANTITY clamps to the same ceiling anyway, so the
    cap only keeps later arithmetic inside the decimal context.
    """
    number = to_quantity(value)
    if number is None:
        return None
    bound = Decimal(MAX_LINE_QUANTITY)
    return max(-bound, min(bound, number))


def _json_number(value: Decimal) -> Union[int, float]:
    """
    Integral decimals become ints so stored payloads read naturally.

    Other values are already on the price or quantity grid, which float
    reprs reproduce digit for digit.
    """
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class CartProduct:
    """Product data needed to add a line to the cart (a CartItem without quantity)."""
    product_id: str
    name: str
    slug: str
    price: Decimal
    selling_mode: str = SellingMode.PIECE.value
    min_order_quantity: Decimal = Decimal("1")
    image: Optional[str] = None

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be a non-empty string")
        object.__setattr__(self, "price", _require_price(self.price))
        object.__setattr__(self, "selling_mode", _coerce_selling_mode(self.selling_mode))
        object.__setattr__(
            self,
            "min_order_quantity",
            _require_quantity(self.min_order_quantity, "min_order_quantity"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartProduct":
        """Accepts both storage keys (productId) and snake_case keys."""
        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        return cls(
            product_id=pick("productId", "product_id"),
            name=str(data.get("name", "")),
            slug=str(data.get("slug", "")),
            price=pick("price", "price"),
            selling_mode=pick("sellingMode", "selling_mode", SellingMode.PIECE.value),
            min_order_quantity=pick("minOrderQuantity", "min_order_quantity", 1),
            image=data.get("image"),
        )

    def to_item(self, quantity: Decimal) -> "CartItem":
        return CartItem(
            product_id=self.product_id,
            name=self.name,
            slug=self.slug,
            price=self.price,
            quantity=quantity,
            selling_mode=self.selling_mode,
            min_order_quantity=self.min_order_quantity,
            image=self.image,
        )


@dataclass(frozen=True)
class CartItem:
    """One product line in the cart."""
    product_id: str
    name: str
    slug: str
    price: Decimal
    quantity: Decimal
    selling_mode: str = SellingMode.PIECE.value
    min_order_quantity: Decimal = Decimal("1")
    image: Optional[str] = None

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be a non-empty string")
        object.__setattr__(self, "price", _require_price(self.price))
        object.__setattr__(self, "quantity", _require_quantity(self.quantity))
        object.__setattr__(self, "selling_mode", _coerce_selling_mode(self.selling_mode))
        object.__setattr__(
            self,
            "min_order_quantity",
            _require_quantity(self.min_order_quantity, "min_order_quantity"),
        )

    @property
    def line_total(self) -> Decimal:
        """Price for all units of this line."""
        return round_money(multiply(self.price, self.quantity))

    def to_dict(self) -> dict:
        """Storage representation (same field names the web client uses)."""
        data = {
            "productId": self.product_id,
            "name": self.name,
            "slug": self.slug,
            "price": _json_number(self.price),
            "quantity": _json_number(self.quantity),
            "sellingMode": self.selling_mode,
            "minOrderQuantity": _json_number(self.min_order_quantity),
        }
        if self.image is not None:
            data["image"] = self.image
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartItem":
        """
        Parse a stored line.

        Raises:
            KeyError, TypeError, ValueError: If the entry is not a valid line
        """
        if not isinstance(data, Mapping):
            raise TypeError("cart entry must be an object")
        return cls(
            product_id=data["productId"],
            name=str(data.get("name", "")),
            slug=str(data.get("slug", "")),
            price=data["price"],
            quantity=data["quantity"],
            selling_mode=data["sellingMode"],
            min_order_quantity=data.get("minOrderQuantity", 1),
            image=data.get("image"),
        )


@dataclass(frozen=True)
class CartState:
    """Cart snapshot. Replaced wholesale on every event."""
    items: tuple[CartItem, ...] = field(default_factory=tuple)
    is_open: bool = False
    is_loading: bool = False

    @property
    def item_count(self) -> int:
        """Number of lines (what the header badge shows)."""
        return len(self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def find(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)


@dataclass(frozen=True)
class CartSummary:
    """Totals shown on the cart page."""
    item_count: int
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
    free_shipping_remaining: Decimal
    meets_minimum_order: bool


def max_quantity_for(selling_mode: str, limits: Optional[QuantityLimits] = None) -> Decimal:
    """Ceiling for a selling mode (meter or piece)."""
    return (limits or get_quantity_limits()).max_for(selling_mode)


def clamp_quantity(quantity: Decimal, floor: Decimal, ceiling: Decimal) -> Decimal:
    return min(ceiling, max(floor, quantity))


def summarize_cart(state: CartState, settings: Optional[ShopSettings] = None) -> CartSummary:
    """
    Compute subtotal, shipping and total for the cart page.

    Shipping is free at or above the threshold, the base rate otherwise,
    and zero for an empty cart.
    """
    settings = settings or get_shop_settings()
    subtotal = state.subtotal

    if not state.items or subtotal >= settings.shipping_free_threshold:
        shipping = Decimal("0")
    else:
        shipping = settings.shipping_base_rate

    remaining = max(Decimal("0"), settings.shipping_free_threshold - subtotal)

    return CartSummary(
        item_count=state.item_count,
        subtotal=round_money(subtotal),
        shipping=round_money(shipping),
        total=round_money(subtotal + shipping),
        free_shipping_remaining=round_money(remaining),
        meets_minimum_order=bool(state.items) and subtotal >= settings.order_min_amount,
    )


class CartStore(Store[CartState]):
    """
    Shopping cart container.

    Events (send() names, matching the web client):
        hydrate, addItem, updateQuantity, incrementQuantity, decrementQuantity,
        removeItem, clearCart, toggleCart, openCart, closeCart, setLoading
    """

    name = "cart"

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        limits: Optional[QuantityLimits] = None,
        storage_key: str = CART_STORAGE_KEY,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.limits = limits or get_quantity_limits()
        self.storage_key = storage_key
        super().__init__(
            CartState(),
            {
                "hydrate": self._on_hydrate,
                "addItem": self._on_add_item,
                "updateQuantity": self._on_update_quantity,
                "incrementQuantity": self._on_increment_quantity,
                "decrementQuantity": self._on_decrement_quantity,
                "removeItem": self._on_remove_item,
                "clearCart": self._on_clear_cart,
                "toggleCart": lambda state, _: replace(state, is_open=not state.is_open),
                "openCart": lambda state, _: replace(state, is_open=True),
                "closeCart": lambda state, _: replace(state, is_open=False),
                "setLoading": lambda state, event: replace(
                    state, is_loading=bool(event.get("isLoading"))
                ),
            },
        )

    # ==================== PUBLIC OPERATIONS ====================

    def hydrate(self) -> CartState:
        """Replace items with whatever durable storage holds (empty on any failure)."""
        return self.send({"type": "hydrate"})

    def add_item(self, item: Union[CartProduct, CartItem, Mapping[str, Any]], quantity: Any) -> CartState:
        """Add or merge a product line and open the drawer."""
        return self.send({"type": "addItem", "item": item, "quantity": quantity})

    def update_quantity(self, product_id: str, quantity: Any) -> CartState:
        return self.send({"type": "updateQuantity", "productId": product_id, "quantity": quantity})

    def increment_quantity(self, product_id: str) -> CartState:
        return self.send({"type": "incrementQuantity", "productId": product_id})

    def decrement_quantity(self, product_id: str) -> CartState:
        """Step down by one; the line is removed when it would drop below its minimum."""
        return self.send({"type": "decrementQuantity", "productId": product_id})

    def remove_item(self, product_id: str) -> CartState:
        return self.send({"type": "removeItem", "productId": product_id})

    def clear_cart(self) -> CartState:
        return self.send({"type": "clearCart"})

    def toggle_cart(self) -> CartState:
        return self.send({"type": "toggleCart"})

    def open_cart(self) -> CartState:
        return self.send({"type": "openCart"})

    def close_cart(self) -> CartState:
        return self.send({"type": "closeCart"})

    def set_loading(self, is_loading: bool) -> CartState:
        return self.send({"type": "setLoading", "isLoading": is_loading})

    # ==================== READ HELPERS ====================

    def quantity_in_cart(self, product_id: str) -> Decimal:
        item = self._state.find(product_id)
        return item.quantity if item else Decimal("0")

    def can_increment(self, product_id: str) -> bool:
        """Whether one more step fits under the ceiling."""
        item = self._state.find(product_id)
        if item is None:
            return False
        return item.quantity + STEP <= self.limits.max_for(item.selling_mode)

    def can_decrement(self, product_id: str) -> bool:
        """Whether one step down keeps the line at or above its minimum."""
        item = self._state.find(product_id)
        if item is None:
            return False
        return item.quantity - STEP >= item.min_order_quantity

    # ==================== PERSISTENCE ====================

    def _load_items(self) -> tuple[CartItem, ...]:
        try:
            raw = self.storage.get_item(self.storage_key)
        except Exception as e:
            logger.warning(f"Failed to read cart from storage: {e}", exc_info=True)
            return ()

        if not raw:
            return ()

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("stored cart is not a list")
            parsed = [CartItem.from_dict(entry) for entry in data]
        except (ValueError, KeyError, TypeError, RecursionError) as e:
            logger.warning(f"Corrupted cart data in storage, starting empty: {e}")
            return ()

        items: list[CartItem] = []
        seen: set[str] = set()
        for item in parsed:
            if item.product_id in seen:
                logger.warning(
                    f"Dropping duplicate stored line {sanitize_id_for_logging(item.product_id)}"
                )
                continue
            seen.add(item.product_id)
            items.append(item)
        return tuple(items)

    def _save_items(self, items: tuple[CartItem, ...]) -> None:
        try:
            payload = json.dumps([item.to_dict() for item in items])
            self.storage.set_item(self.storage_key, payload)
        except Exception as e:
            # The in-memory cart stays the source of truth for this session
            logger.warning(f"Failed to persist cart: {e}", exc_info=True)

    def _commit(self, state: CartState, items: tuple[CartItem, ...], **changes: Any) -> CartState:
        self._save_items(items)
        return replace(state, items=items, **changes)

    # ==================== TRANSITIONS ====================

    def _on_hydrate(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        items = self._load_items()
        logger.debug(f"Hydrated cart with {len(items)} line(s)")
        return replace(state, items=items)

    def _on_add_item(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        product = self._coerce_product(event.get("item"))
        quantity = _requested_quantity(event.get("quantity"))

        if product is None or quantity is None or quantity <= 0:
            logger.warning("Ignoring addItem with invalid item or quantity")
            return replace(state, is_open=True)

        existing = state.find(product.product_id)
        if existing is not None:
            new_quantity = clamp_quantity(
                existing.quantity + quantity,
                existing.min_order_quantity,
                self.limits.max_for(existing.selling_mode),
            )
            items = tuple(
                replace(item, quantity=new_quantity) if item is existing else item
                for item in state.items
            )
        else:
            new_quantity = clamp_quantity(
                quantity,
                product.min_order_quantity,
                self.limits.max_for(product.selling_mode),
            )
            items = state.items + (product.to_item(new_quantity),)

        return self._commit(state, items, is_open=True)

    def _on_update_quantity(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        product_id = event.get("productId")
        quantity = _requested_quantity(event.get("quantity"))
        if quantity is None:
            logger.warning(f"Ignoring updateQuantity for {sanitize_id_for_logging(str(product_id))}: bad quantity")
            return state

        items = tuple(
            replace(
                item,
                quantity=clamp_quantity(
                    quantity,
                    item.min_order_quantity,
                    self.limits.max_for(item.selling_mode),
                ),
            )
            if item.product_id == product_id
            else item
            for item in state.items
        )
        return self._commit(state, items)

    def _on_increment_quantity(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        product_id = event.get("productId")
        items = tuple(
            replace(
                item,
                quantity=min(item.quantity + STEP, self.limits.max_for(item.selling_mode)),
            )
            if item.product_id == product_id
            else item
            for item in state.items
        )
        return self._commit(state, items)

    def _on_decrement_quantity(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        product_id = event.get("productId")
        items: list[CartItem] = []
        for item in state.items:
            if item.product_id != product_id:
                items.append(item)
                continue
            new_quantity = item.quantity - STEP
            if new_quantity < item.min_order_quantity:
                continue
            items.append(replace(item, quantity=new_quantity))
        return self._commit(state, tuple(items))

    def _on_remove_item(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        product_id = event.get("productId")
        items = tuple(item for item in state.items if item.product_id != product_id)
        return self._commit(state, items)

    def _on_clear_cart(self, state: CartState, event: Mapping[str, Any]) -> CartState:
        return self._commit(state, ())

    @staticmethod
    def _coerce_product(value: Any) -> Optional[CartProduct]:
        if isinstance(value, CartProduct):
            return value
        if isinstance(value, CartItem):
            return CartProduct(
                product_id=value.product_id,
                name=value.name,
                slug=value.slug,
                price=value.price,
                selling_mode=value.selling_mode,
                min_order_quantity=value.min_order_quantity,
                image=value.image,
            )
        if isinstance(value, Mapping):
            try:
                return CartProduct.from_dict(value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid cart product: {e}")
                return None
        return None
