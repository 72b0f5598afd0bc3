import math
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..core.exceptions import NotFoundError
from ..schemas.product import Pagination, ProductOut, ProductPage
from .models import Product
from .repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:

    @staticmethod
    def list_products(
        db: Session,
        page: int,
        limit: int,
        search: Optional[str] = None,
        category: Optional[str] = None,
        featured: bool = False,
    ) -> ProductPage:
        """Filter the catalogue, then paginate what is left."""
        rows, total = ProductRepository(db).search(
            page=page,
            limit=limit,
            search=search.strip() if search else None,
            category=category.strip() if category else None,
            featured_only=featured,
        )
        logger.info(f"Product query page={page} limit={limit} search={search!r} category={category!r} -> {total} matches")
        return ProductPage(
            data=[ProductOut.model_validate(p) for p in rows],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit) if total else 0,
            ),
        )

    @staticmethod
    def get_product(db: Session, product_id: str) -> Product:
        product = ProductRepository(db).find_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    def get_featured(db: Session, limit: int) -> List[Product]:
        return ProductRepository(db).featured(limit)

    @staticmethod
    def get_categories(db: Session) -> List[str]:
        return ProductRepository(db).categories()
