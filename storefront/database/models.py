# Central models file: importing it registers every table with Base.metadata

from .core import Base

from ..users.models import User
from ..products.models import Product
from ..cart.models import CartItem
from ..orders.models import Order, OrderItem
from ..auth.models import RevokedToken

__all__ = [
    "Base",
    "User",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "RevokedToken",
]
