from datetime import datetime
from typing import List, Optional

from .common import CamelModel, RequestModel
from .product import ProductOut


class AddToCartRequest(RequestModel):
    # Presence and range are business rules checked by CartService
    product_id: Optional[str] = None
    quantity: Optional[int] = None


class UpdateCartItemRequest(RequestModel):
    quantity: Optional[int] = None


class CartLine(CamelModel):
    id: str
    cart_id: str
    product_id: str
    quantity: int
    price: float
    product: Optional[ProductOut] = None
    subtotal: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartView(CamelModel):
    id: str
    user_id: str
    items: List[CartLine]
    total_items: int
    total_price: float
    total_amount: float
    created_at: datetime
    updated_at: datetime
