"""HTTP routers for the storefront session API."""
from .cart import router as cart_router
from .ui import router as ui_router

__all__ = ["cart_router", "ui_router"]
