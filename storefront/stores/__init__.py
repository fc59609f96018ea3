"""Stores package: state containers for the cart and UI overlays."""
from .base import Store, Subscription
from .cart import (
    CartItem,
    CartProduct,
    CartState,
    CartStore,
    CartSummary,
    max_quantity_for,
    summarize_cart,
)
from .ui import UIState, UIStore

__all__ = [
    "Store",
    "Subscription",
    "CartItem",
    "CartProduct",
    "CartState",
    "CartStore",
    "CartSummary",
    "max_quantity_for",
    "summarize_cart",
    "UIState",
    "UIStore",
]
