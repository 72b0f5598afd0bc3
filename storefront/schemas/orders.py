from datetime import datetime
from typing import Any, Dict, List, Optional

from .common import CamelModel, RequestModel


class ShippingAddressIn(RequestModel):
    # All fields optional here so checkout can name every missing one at once
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class CreateOrderRequest(RequestModel):
    shipping_address: Optional[ShippingAddressIn] = None
    payment_method: Optional[str] = None


class ShippingAddressOut(CamelModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str


class OrderItemOut(CamelModel):
    id: str
    order_id: str
    product_id: str
    product_name: str
    product_price: float
    price: float
    quantity: int
    subtotal: float
    product: Optional[Dict[str, Any]] = None


class OrderOut(CamelModel):
    id: str
    order_number: str
    user_id: str
    items: List[OrderItemOut]
    total: float
    total_amount: float
    subtotal: float
    shipping: float
    tax: float
    status: str
    shipping_address: ShippingAddressOut
    payment_method: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order) -> "OrderOut":
        """Build the response model from an Order row and its frozen items."""
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            items=[
                OrderItemOut(
                    id=item.id,
                    order_id=order.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    product_price=item.price,
                    price=item.price,
                    quantity=item.quantity,
                    subtotal=item.subtotal,
                    product=item.product_data,
                )
                for item in order.items
            ],
            total=order.total,
            total_amount=order.total,
            subtotal=order.subtotal,
            shipping=order.shipping,
            tax=order.tax,
            status=order.status,
            shipping_address=ShippingAddressOut(**order.shipping_address),
            payment_method=order.payment_method,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
