"""
Cart Router

Session endpoints over the cart store. Every endpoint returns the full
cart payload so the client can re-render from one response.

Handlers are async and never await inside a store call, so each event
runs to completion before the next request touches the store.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.config import get_shop_settings
from storefront.errors import ERROR_UNKNOWN_DRAWER_ACTION
from storefront.formatting import format_quantity, format_unit
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.money import format_price, to_float
from storefront.stores import CartProduct, CartState, CartStore, summarize_cart
from .deps import get_cart_store
from .models import AddToCartRequest, SetLoadingRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _format_cart_response(state: CartState, store: CartStore) -> dict:
    """
    Build cart response.

    - numeric fields for calculations
    - *_display fields formatted for the UI (rupees, unit labels)
    """
    summary = summarize_cart(state, get_shop_settings())

    items = []
    for item in state.items:
        items.append({
            "product_id": item.product_id,
            "name": item.name,
            "slug": item.slug,
            "image": item.image,
            "selling_mode": item.selling_mode,
            "price": to_float(item.price),
            "quantity": to_float(item.quantity),
            "min_order_quantity": to_float(item.min_order_quantity),
            "line_total": to_float(item.line_total),
            # Display values
            "price_display": f"{format_price(item.price)} / {format_unit(item.selling_mode)}",
            "quantity_display": format_quantity(item.quantity, item.selling_mode),
            "unit_display": format_unit(item.selling_mode, item.quantity),
            "line_total_display": format_price(item.line_total),
            # Quantity controls
            "can_increment": store.can_increment(item.product_id),
            "can_decrement": store.can_decrement(item.product_id),
        })

    return {
        "items": items,
        "is_open": state.is_open,
        "is_loading": state.is_loading,
        "item_count": summary.item_count,
        "subtotal": to_float(summary.subtotal),
        "shipping": to_float(summary.shipping),
        "total": to_float(summary.total),
        "free_shipping_remaining": to_float(summary.free_shipping_remaining),
        "meets_minimum_order": summary.meets_minimum_order,
        "subtotal_display": format_price(summary.subtotal),
        "shipping_display": format_price(summary.shipping),
        "total_display": format_price(summary.total),
    }


@router.get("")
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Current cart with totals."""
    return _format_cart_response(store.get_snapshot(), store)


@router.post("/hydrate")
async def hydrate_cart(store: CartStore = Depends(get_cart_store)):
    """Reload items from durable storage."""
    return _format_cart_response(store.hydrate(), store)


@router.post("/items")
async def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add a product (merges into an existing line) and open the drawer."""
    product = CartProduct(
        product_id=request.item.product_id,
        name=request.item.name,
        slug=request.item.slug,
        price=request.item.price,
        selling_mode=request.item.selling_mode,
        min_order_quantity=request.item.min_order_quantity,
        image=request.item.image,
    )
    logger.info(f"Adding {sanitize_id_for_logging(product.product_id)} x{request.quantity} to cart")
    return _format_cart_response(store.add_item(product, request.quantity), store)


@router.patch("/items/{product_id}")
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Set quantity, clamped to the line's bounds."""
    return _format_cart_response(store.update_quantity(product_id, request.quantity), store)


@router.post("/items/{product_id}/increment")
async def increment_cart_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.increment_quantity(product_id), store)


@router.post("/items/{product_id}/decrement")
async def decrement_cart_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    """Step down; the line disappears once it would go below its minimum."""
    return _format_cart_response(store.decrement_quantity(product_id), store)


@router.delete("/items/{product_id}")
async def remove_cart_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.remove_item(product_id), store)


@router.delete("")
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.clear_cart(), store)


@router.post("/drawer/{action}")
async def cart_drawer(action: str, store: CartStore = Depends(get_cart_store)):
    """Drawer visibility: toggle, open or close."""
    handlers = {
        "toggle": store.toggle_cart,
        "open": store.open_cart,
        "close": store.close_cart,
    }
    handler = handlers.get(action)
    if handler is None:
        raise HTTPException(status_code=400, detail=ERROR_UNKNOWN_DRAWER_ACTION)
    return _format_cart_response(handler(), store)


@router.post("/loading")
async def set_cart_loading(request: SetLoadingRequest, store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.set_loading(request.is_loading), store)
