from sqlalchemy.orm import Session
from typing import Dict, List, Optional
import uuid
import logging
from datetime import datetime, timezone

from ..cart.models import CartItem
from ..cart.repository import CartRepository
from ..cart.service import line_subtotal, money
from ..core.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..core.locks import locks, product_key, user_key
from ..products.models import Product
from ..products.repository import ProductRepository
from ..schemas.orders import CreateOrderRequest
from ..schemas.product import ProductOut
from .models import Order, OrderItem, OrderStatus
from .repository import OrderRepository

logger = logging.getLogger(__name__)

# (attribute, JSON name) in the order the error message lists them
SHIPPING_FIELDS = (
    ("street", "street"),
    ("city", "city"),
    ("state", "state"),
    ("zip_code", "zipCode"),
    ("country", "country"),
)
DEFAULT_PAYMENT_METHOD = "credit_card"
SHIPPING_COST = 0.0
TAX = 0.0


def generate_order_number() -> str:
    """Human-readable, time-derived order number, e.g. ORD-20261017143005-3FA2C1."""
    return f"ORD-{datetime.now(timezone.utc):%Y%m%d%H%M%S}-{uuid.uuid4().hex[:6].upper()}"


class CheckoutService:
    """
    Turns a user's cart into a pending order.

    Stages run strictly in order: validate the shipping address, load the
    cart, re-check every line against live stock, compute totals, then commit
    order creation, stock decrement and cart clearing as one transaction.
    Every check finishes before the first write, so a failed check leaves
    orders, stock and cart untouched.
    """

    @staticmethod
    def validate_shipping_address(request: CreateOrderRequest) -> Dict[str, str]:
        address = request.shipping_address
        values = {}
        missing = []
        for attr, json_name in SHIPPING_FIELDS:
            value = getattr(address, attr, None) if address else None
            if value is None or not value.strip():
                missing.append(json_name)
            else:
                values[attr] = value.strip()
        if missing:
            raise ValidationError(
                f"Complete shipping address is required; missing: {', '.join(missing)}",
                fields=missing,
            )
        return values

    @staticmethod
    def check_stock(cart_items: List[CartItem], products: Dict[str, Product]) -> None:
        for item in cart_items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundError("Product", item.product_id)
            if product.stock < item.quantity:
                raise InsufficientStockError(product.name, item.quantity, product.stock)

    @staticmethod
    def place_order(db: Session, user_id: str, request: CreateOrderRequest) -> Order:
        shipping_address = CheckoutService.validate_shipping_address(request)

        with locks.hold(user_key(user_id)):
            carts = CartRepository(db)
            cart_items = carts.find_by_user(user_id)
            if not cart_items:
                raise EmptyCartError()

            product_ids = [item.product_id for item in cart_items]
            with locks.hold(*[product_key(pid) for pid in product_ids]):
                products_repo = ProductRepository(db)
                products = {p.id: p for p in products_repo.find_many(product_ids)}
                CheckoutService.check_stock(cart_items, products)

                subtotal = money(sum(line_subtotal(item) for item in cart_items))
                total = money(subtotal + SHIPPING_COST + TAX)

                order = Order(
                    user_id=user_id,
                    order_number=generate_order_number(),
                    subtotal=subtotal,
                    shipping=SHIPPING_COST,
                    tax=TAX,
                    total=total,
                    status=OrderStatus.PENDING.value,
                    shipping_address=shipping_address,
                    payment_method=request.payment_method or DEFAULT_PAYMENT_METHOD,
                )
                for position, item in enumerate(cart_items):
                    product = products[item.product_id]
                    order.items.append(
                        OrderItem(
                            position=position,
                            product_id=item.product_id,
                            product_name=product.name,
                            price=item.price,
                            quantity=item.quantity,
                            subtotal=line_subtotal(item),
                            product_data=ProductOut.model_validate(product).model_dump(mode="json", by_alias=True),
                        )
                    )

                try:
                    OrderRepository(db).add(order)
                    for item in cart_items:
                        products_repo.adjust_stock(products[item.product_id], -item.quantity)
                    carts.delete_by_user(user_id)
                    db.commit()
                except Exception:
                    logger.exception(f"Checkout commit failed for user {user_id}; rolled back")
                    db.rollback()
                    raise

        db.refresh(order)
        logger.info(f"Order {order.order_number} placed by user {user_id}: {len(order.items)} lines, total {order.total}")
        return order


class OrderService:

    @staticmethod
    def list_orders(db: Session, user_id: str, status: Optional[str] = None) -> List[Order]:
        """Caller's orders, newest first, optionally filtered by status."""
        return OrderRepository(db).find_by_user(user_id, status)

    @staticmethod
    def get_order(db: Session, user_id: str, order_id: str) -> Order:
        order = OrderRepository(db).find_owned(user_id, order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    @staticmethod
    def cancel_order(db: Session, user_id: str, order_id: str) -> Order:
        """
        Cancel a pending order and put its frozen quantities back in stock.

        Products that no longer exist are skipped; the status change and every
        stock increment commit together.
        """
        with locks.hold(user_key(user_id)):
            order = OrderService.get_order(db, user_id, order_id)
            if order.status != OrderStatus.PENDING.value:
                raise InvalidStateError("Only pending orders can be cancelled", current_state=order.status)

            product_ids = [item.product_id for item in order.items]
            with locks.hold(*[product_key(pid) for pid in product_ids]):
                products_repo = ProductRepository(db)
                products = {p.id: p for p in products_repo.find_many(product_ids)}
                try:
                    order.status = OrderStatus.CANCELLED.value
                    for item in order.items:
                        product = products.get(item.product_id)
                        if product is None:
                            logger.warning(f"Order {order.order_number}: product {item.product_id} gone, stock not restored")
                            continue
                        products_repo.adjust_stock(product, item.quantity)
                    db.commit()
                except Exception:
                    logger.exception(f"Cancelling order {order_id} failed; rolled back")
                    db.rollback()
                    raise

        db.refresh(order)
        logger.info(f"Order {order.order_number} cancelled by user {user_id}")
        return order
