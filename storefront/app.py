"""
Application composition root.

create_app() owns the process-wide stores: one CartStore backed by the
configured durable storage and one UIStore. They live on app.state and
reach endpoints through dependencies, never as module globals.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_cart_storage_key
from .constants import STORE_INFO
from .logging import get_logger
from .routers import cart_router, ui_router
from .selectors import Selection
from .storage import get_storage
from .stores import CartStore, UIStore

logger = get_logger(__name__)


def _watch_cart_badge(cart_store: CartStore) -> Selection:
    """Log header badge changes (number of cart lines)."""
    badge = Selection(cart_store, lambda state: state.item_count)
    badge.subscribe(lambda count: logger.info(f"Cart badge now shows {count} line(s)"))
    return badge


def create_app(
    cart_store: Optional[CartStore] = None,
    ui_store: Optional[UIStore] = None,
) -> FastAPI:
    """Build the FastAPI app with its stores."""
    if cart_store is None:
        cart_store = CartStore(storage=get_storage(), storage_key=get_cart_storage_key())
    ui_store = ui_store if ui_store is not None else UIStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        # Startup: load the persisted cart once
        state = app.state.cart_store.hydrate()
        logger.info(f"Cart hydrated with {state.item_count} line(s)")
        yield
        # Shutdown
        app.state.cart_badge.close()

    app = FastAPI(
        title=f"{STORE_INFO['name']} Storefront",
        description="Cart and UI session API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.cart_store = cart_store
    app.state.ui_store = ui_store
    app.state.cart_badge = _watch_cart_badge(cart_store)

    app.include_router(cart_router)
    app.include_router(ui_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "storefront"}

    return app
