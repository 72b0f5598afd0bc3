from datetime import datetime
from typing import List, Optional

from .common import CamelModel


class ProductOut(CamelModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    image_url: Optional[str] = None
    stock: int
    rating: float
    review_count: int
    featured: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ProductPage(CamelModel):
    data: List[ProductOut]
    pagination: Pagination
