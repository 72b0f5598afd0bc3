from sqlalchemy.orm import Session
from typing import List, Optional

from .models import Order


class OrderRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_owned(self, user_id: str, order_id: str) -> Optional[Order]:
        """Return the order only if it belongs to user_id."""
        order = self.db.get(Order, order_id)
        if order is None or order.user_id != user_id:
            return None
        return order

    def find_by_user(self, user_id: str, status: Optional[str] = None) -> List[Order]:
        query = self.db.query(Order).filter(Order.user_id == user_id)
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc(), Order.order_number.desc()).all()

    def add(self, order: Order) -> Order:
        self.db.add(order)
        return order
