from sqlalchemy import Column, String, Integer, Float, ForeignKey, DateTime, UniqueConstraint
from ..database.core import Base
import uuid
from datetime import datetime, timezone


class CartItem(Base):
    __tablename__ = "cart_items"
    # One line per (user, product); adding the same product again merges quantities
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # No foreign key: a line may outlive its product and is then shown with a null product
    product_id = Column(String(36), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)  # unit price captured when the line was created
    added_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
