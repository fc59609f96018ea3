"""
Session API Pydantic Models

Request bodies for the cart and UI endpoints. Only shapes are validated
here, plus upper bounds on product data. Requested quantities are the cart
store's job (it clamps instead of rejecting).
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from storefront.constants import MAX_LINE_QUANTITY, MAX_UNIT_PRICE, SellingMode


# ==================== CART MODELS ====================

class CartProductPayload(BaseModel):
    product_id: str = Field(min_length=1)
    name: str
    slug: str
    price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)
    selling_mode: SellingMode = SellingMode.PIECE
    min_order_quantity: Decimal = Field(default=Decimal("1"), ge=0, le=MAX_LINE_QUANTITY)
    image: Optional[str] = None


class AddToCartRequest(BaseModel):
    item: CartProductPayload
    quantity: Decimal


class UpdateCartItemRequest(BaseModel):
    quantity: Decimal


class SetLoadingRequest(BaseModel):
    is_loading: bool


# ==================== UI MODELS ====================

class UIEventRequest(BaseModel):
    type: str
    modal_id: Optional[str] = None
