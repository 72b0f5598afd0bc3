from sqlalchemy.orm import Session
from typing import List, Optional

from .models import CartItem


class CartRepository:
    """Cart lines of every user; callers always scope by user_id."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_user(self, user_id: str) -> List[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.added_at, CartItem.id)
            .all()
        )

    def find_line(self, user_id: str, product_id: str) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .first()
        )

    def find_owned(self, user_id: str, item_id: str) -> Optional[CartItem]:
        """Return the line only if it belongs to user_id."""
        item = self.db.get(CartItem, item_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    def add(self, item: CartItem) -> CartItem:
        self.db.add(item)
        return item

    def delete(self, item: CartItem) -> None:
        self.db.delete(item)

    def delete_by_user(self, user_id: str) -> int:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .delete(synchronize_session="fetch")
        )
