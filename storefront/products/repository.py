from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

from .models import Product


class ProductRepository:
    """Read/write access to product rows for one database session."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def find_many(self, product_ids: List[str]) -> List[Product]:
        if not product_ids:
            return []
        return self.db.query(Product).filter(Product.id.in_(product_ids)).all()

    def search(
        self,
        page: int,
        limit: int,
        search: Optional[str] = None,
        category: Optional[str] = None,
        featured_only: bool = False,
    ) -> Tuple[List[Product], int]:
        """Filter, count, then slice one page. Returns (page rows, total matches)."""
        query = self.db.query(Product)

        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(Product.description).like(pattern),
                    func.lower(Product.category).like(pattern),
                )
            )
        if category:
            query = query.filter(func.lower(Product.category) == category.lower())
        if featured_only:
            query = query.filter(Product.featured.is_(True))

        total = query.count()
        rows = (
            query.order_by(Product.created_at, Product.name)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total

    def categories(self) -> List[str]:
        rows = self.db.query(Product.category).distinct().order_by(Product.category).all()
        return [row[0] for row in rows]

    def featured(self, limit: int) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.featured.is_(True))
            .order_by(Product.rating.desc(), Product.review_count.desc())
            .limit(limit)
            .all()
        )

    def add(self, product: Product) -> Product:
        self.db.add(product)
        return product

    def adjust_stock(self, product: Product, delta: int) -> Product:
        """Apply a stock delta to a loaded row; the caller owns the transaction."""
        new_stock = product.stock + delta
        if new_stock < 0:
            raise ValueError(f"Stock for product {product.id} would become negative")
        product.stock = new_stock
        return product
