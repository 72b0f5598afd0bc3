from fastapi import APIRouter

from ..auth.service import CurrentUser
from ..database.core import DbSession
from ..schemas.cart import AddToCartRequest, CartView, UpdateCartItemRequest
from ..schemas.common import ApiResponse
from .service import CartService

# Every route depends on CurrentUser, so unauthenticated calls never reach the service
router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=ApiResponse[CartView])
async def get_cart(current_user: CurrentUser, db: DbSession):
    """Get the caller's aggregated cart."""
    return ApiResponse(data=CartService.get_cart(db, current_user.user_id))


@router.post("", response_model=ApiResponse[CartView])
async def add_to_cart(request: AddToCartRequest, current_user: CurrentUser, db: DbSession):
    """Add a product, merging with an existing line for it."""
    cart = CartService.add_item(db, current_user.user_id, request.product_id, request.quantity)
    return ApiResponse(data=cart)


@router.put("/{item_id}", response_model=ApiResponse[CartView])
async def update_cart_item(item_id: str, request: UpdateCartItemRequest, current_user: CurrentUser, db: DbSession):
    """Replace the quantity of one of the caller's cart lines."""
    cart = CartService.update_item(db, current_user.user_id, item_id, request.quantity)
    return ApiResponse(data=cart)


@router.delete("/{item_id}", response_model=ApiResponse[CartView])
async def remove_from_cart(item_id: str, current_user: CurrentUser, db: DbSession):
    """Remove one of the caller's cart lines."""
    return ApiResponse(data=CartService.remove_item(db, current_user.user_id, item_id))


@router.delete("", response_model=ApiResponse[CartView])
async def clear_cart(current_user: CurrentUser, db: DbSession):
    """Empty the caller's cart."""
    return ApiResponse(data=CartService.clear_cart(db, current_user.user_id))
