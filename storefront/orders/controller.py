from fastapi import APIRouter, Query
from starlette import status
from typing import List, Optional

from ..auth.service import CurrentUser
from ..database.core import DbSession
from ..schemas.common import ApiResponse
from ..schemas.orders import CreateOrderRequest, OrderOut
from .service import CheckoutService, OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

STATUS_PATTERN = r"^(pending|processing|shipped|delivered|cancelled)$"


@router.post("", response_model=ApiResponse[OrderOut], status_code=status.HTTP_201_CREATED)
async def create_order(request: CreateOrderRequest, current_user: CurrentUser, db: DbSession):
    """Check out the caller's cart."""
    order = CheckoutService.place_order(db, current_user.user_id, request)
    return ApiResponse(data=OrderOut.from_order(order))


@router.get("", response_model=ApiResponse[List[OrderOut]])
async def get_orders(
    current_user: CurrentUser,
    db: DbSession,
    order_status: Optional[str] = Query(None, alias="status", pattern=STATUS_PATTERN),
):
    """Get the caller's orders, newest first."""
    orders = OrderService.list_orders(db, current_user.user_id, order_status)
    return ApiResponse(data=[OrderOut.from_order(o) for o in orders])


@router.get("/{order_id}", response_model=ApiResponse[OrderOut])
async def get_order(order_id: str, current_user: CurrentUser, db: DbSession):
    """Get one of the caller's orders."""
    return ApiResponse(data=OrderOut.from_order(OrderService.get_order(db, current_user.user_id, order_id)))


@router.put("/{order_id}/cancel", response_model=ApiResponse[OrderOut])
async def cancel_order(order_id: str, current_user: CurrentUser, db: DbSession):
    """Cancel a pending order and restore its stock."""
    order = OrderService.cancel_order(db, current_user.user_id, order_id)
    return ApiResponse(data=OrderOut.from_order(order))
