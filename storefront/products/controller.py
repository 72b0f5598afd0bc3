from fastapi import APIRouter, Query
from typing import List, Optional

from ..core.config import settings
from ..database.core import DbSession
from ..schemas.common import ApiResponse
from ..schemas.product import ProductOut, ProductPage
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=ApiResponse[ProductPage])
async def get_products(
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    category: Optional[str] = None,
    featured: bool = False,
):
    """Get a paginated, optionally filtered list of products."""
    return ApiResponse(data=ProductService.list_products(db, page, limit, search, category, featured))


@router.get("/featured", response_model=ApiResponse[List[ProductOut]])
async def get_featured_products(
    db: DbSession,
    limit: int = Query(settings.FEATURED_LIMIT, ge=1, le=settings.MAX_PAGE_SIZE),
):
    """Get the highest-rated featured products."""
    products = ProductService.get_featured(db, limit)
    return ApiResponse(data=[ProductOut.model_validate(p) for p in products])


@router.get("/categories", response_model=ApiResponse[List[str]])
async def get_categories(db: DbSession):
    """Get the sorted list of product categories."""
    return ApiResponse(data=ProductService.get_categories(db))


@router.get("/{product_id}", response_model=ApiResponse[ProductOut])
async def get_product(product_id: str, db: DbSession):
    """Get a single product by id."""
    return ApiResponse(data=ProductOut.model_validate(ProductService.get_product(db, product_id)))
