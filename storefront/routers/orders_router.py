"""Customer order history router."""

from typing import List

from fastapi import APIRouter, Depends

from ..auth import CurrentUser, get_current_user
from ..dependencies import get_order_service
from ..exceptions import OrderNotFoundException
from ..models import ErrorResponse, OrderView
from ..services.order_service import OrderService
from ..services.order_viewer import to_order_view

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=List[OrderView], summary="Order history")
async def list_my_orders(
    user: CurrentUser = Depends(get_current_user),
    order_service: OrderService = Depends(get_order_service),
):
    """Orders of the signed-in user, newest first, including mock orders."""
    orders = await order_service.get_orders_by_user(user.id)
    return [to_order_view(order) for order in orders]


@router.get(
    "/{order_id}",
    response_model=OrderView,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Get order",
)
async def get_my_order(
    order_id: str,
    user: CurrentUser = Depends(get_current_user),
    order_service: OrderService = Depends(get_order_service),
):
    """
    Get one order for the confirmation and history pages.

    Falls back to mock orders and finally a placeholder when the order is
    not in the backend. Orders of other users are reported as missing.
    """
    order = await order_service.find_order(order_id)
    owner_id = order.get("user_id")
    if owner_id is not None and owner_id not in (user.id, "mock-user") and not user.is_staff:
        raise OrderNotFoundException(order_id)
    return to_order_view(order)
