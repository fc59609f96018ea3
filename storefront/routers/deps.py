"""
Shared Dependencies for Routers

The stores are created once by create_app() and kept on app.state;
endpoints receive them through these dependencies.
"""
from fastapi import Request

from storefront.stores import CartStore, UIStore


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_ui_store(request: Request) -> UIStore:
    return request.app.state.ui_store
