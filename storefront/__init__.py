"""Naman Textiles storefront: cart and UI state containers with a session API."""
from .selectors import Selection, select
from .stores import CartItem, CartProduct, CartState, CartStore, UIState, UIStore

__all__ = [
    "CartItem",
    "CartProduct",
    "CartState",
    "CartStore",
    "Selection",
    "UIState",
    "UIStore",
    "select",
]
