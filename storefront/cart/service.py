from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from datetime import datetime, timezone
import logging

from ..core.config import settings
from ..core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from ..core.locks import locks, user_key
from ..products.models import Product
from ..products.repository import ProductRepository
from ..schemas.cart import CartLine, CartView
from ..schemas.product import ProductOut
from .models import CartItem
from .repository import CartRepository

logger = logging.getLogger(__name__)


def money(value: float) -> float:
    """Round a currency amount to cents."""
    return round(value, 2)


def line_subtotal(item: CartItem) -> float:
    # Captured unit price, never the live product price
    return money(item.price * item.quantity)


def check_line_quantity(quantity: int) -> None:
    if quantity > settings.MAX_LINE_QUANTITY:
        raise ValidationError(
            f"Quantity cannot exceed {settings.MAX_LINE_QUANTITY}",
            fields=["quantity"],
        )


class CartService:

    @staticmethod
    def build_view(user_id: str, items: List[CartItem], products: Dict[str, Product]) -> CartView:
        """Join cart lines with live products and compute the totals."""
        lines = []
        for item in items:
            product = products.get(item.product_id)
            lines.append(
                CartLine(
                    id=item.id,
                    cart_id=user_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    product=ProductOut.model_validate(product) if product else None,
                    subtotal=line_subtotal(item),
                    created_at=item.added_at,
                    updated_at=item.added_at,
                )
            )

        total_amount = money(sum(line.subtotal for line in lines))
        now = datetime.now(timezone.utc)
        return CartView(
            id=user_id,
            user_id=user_id,
            items=lines,
            total_items=sum(line.quantity for line in lines),
            total_price=total_amount,
            total_amount=total_amount,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def get_cart(db: Session, user_id: str) -> CartView:
        """Aggregated cart of user_id; an empty cart has zero totals."""
        items = CartRepository(db).find_by_user(user_id)
        products = {p.id: p for p in ProductRepository(db).find_many([i.product_id for i in items])}
        missing = [i.product_id for i in items if i.product_id not in products]
        if missing:
            logger.warning(f"Cart of user {user_id} references missing products: {missing}")
        return CartService.build_view(user_id, items, products)

    @staticmethod
    def add_item(db: Session, user_id: str, product_id: Optional[str], quantity: Optional[int]) -> CartView:
        """
        Add quantity of a product to the user's cart.

        An existing line for the product has its quantity incremented; a new
        line captures the product's current price. Stock is checked against
        the requested amount only; checkout is where stock is authoritative.
        """
        if not product_id or quantity is None or quantity <= 0:
            raise ValidationError("Product ID and valid quantity are required", fields=["productId", "quantity"])
        check_line_quantity(quantity)

        with locks.hold(user_key(user_id)):
            product = ProductRepository(db).find_by_id(product_id)
            if not product:
                raise NotFoundError("Product", product_id)
            if product.stock < quantity:
                raise InsufficientStockError(product.name, quantity, product.stock)

            carts = CartRepository(db)
            existing = carts.find_line(user_id, product_id)
            try:
                if existing:
                    check_line_quantity(existing.quantity + quantity)
                    existing.quantity = existing.quantity + quantity
                    logger.info(f"User {user_id}: product {product_id} quantity -> {existing.quantity}")
                else:
                    carts.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity, price=product.price))
                    logger.info(f"User {user_id}: added {quantity} x product {product_id} at {product.price}")
                db.commit()
            except Exception:
                db.rollback()
                raise

        return CartService.get_cart(db, user_id)

    @staticmethod
    def update_item(db: Session, user_id: str, item_id: str, quantity: Optional[int]) -> CartView:
        """Replace a line's quantity. No stock check here."""
        if quantity is None or quantity <= 0:
            raise ValidationError("Valid quantity is required", fields=["quantity"])
        check_line_quantity(quantity)

        with locks.hold(user_key(user_id)):
            item = CartRepository(db).find_owned(user_id, item_id)
            if not item:
                raise NotFoundError("Cart item", item_id)
            try:
                item.quantity = quantity
                db.commit()
            except Exception:
                db.rollback()
                raise

        return CartService.get_cart(db, user_id)

    @staticmethod
    def remove_item(db: Session, user_id: str, item_id: str) -> CartView:
        with locks.hold(user_key(user_id)):
            carts = CartRepository(db)
            item = carts.find_owned(user_id, item_id)
            if not item:
                raise NotFoundError("Cart item", item_id)
            try:
                carts.delete(item)
                db.commit()
            except Exception:
                db.rollback()
                raise

        return CartService.get_cart(db, user_id)

    @staticmethod
    def clear_cart(db: Session, user_id: str) -> CartView:
        """Delete every line of the user's cart. Idempotent."""
        with locks.hold(user_key(user_id)):
            try:
                removed = CartRepository(db).delete_by_user(user_id)
                db.commit()
            except Exception:
                db.rollback()
                raise
        logger.info(f"Cleared {removed} cart lines for user {user_id}")
        return CartService.build_view(user_id, [], {})
