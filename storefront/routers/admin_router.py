"""
Back office router.

Order management is open to staff; product maintenance to admins.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth import CurrentUser, require_admin, require_staff
from ..dependencies import get_order_service, get_order_viewer, get_product_admin_service
from ..domain.entities import OrderStatus
from ..exceptions import OrderNotFoundException
from ..models import (
    ErrorResponse,
    MessageResponse,
    OrderSearchCriteria,
    OrderStatistics,
    OrderStatusUpdate,
    OrderView,
    ProductForm,
)
from ..services.order_service import OrderService
from ..services.order_viewer import OrderViewer, filter_orders, to_order_view
from ..services.product_admin_service import ProductAdminService

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/orders", response_model=List[OrderView], summary="List orders")
async def list_orders(
    search: str = Query("", description="Order number, customer name or email"),
    status_filter: str = Query("all", alias="status"),
    order_number: Optional[str] = None,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    city: Optional[str] = None,
    staff: CurrentUser = Depends(require_staff),
    viewer: OrderViewer = Depends(get_order_viewer),
):
    """
    List orders, newest first.

    Field criteria are applied by the backend query; ``search`` and
    ``status`` filter the result the way the order list screen does.
    """
    criteria = OrderSearchCriteria(
        order_number=order_number,
        customer_name=customer_name,
        customer_phone=customer_phone,
        city=city,
    )
    if not criteria.is_empty():
        records = await viewer.search_orders(criteria)
    elif status_filter in {s.value for s in OrderStatus}:
        records = await viewer.get_orders_by_status(OrderStatus(status_filter))
    else:
        records = await viewer.get_all_orders()

    return filter_orders((to_order_view(r) for r in records), search, status_filter)


@router.get("/orders/statistics", response_model=OrderStatistics, summary="Order statistics")
async def order_statistics(
    staff: CurrentUser = Depends(require_staff),
    viewer: OrderViewer = Depends(get_order_viewer),
):
    return await viewer.get_order_statistics()


@router.get("/orders/recent", response_model=List[OrderView], summary="Recent orders")
async def recent_orders(
    staff: CurrentUser = Depends(require_staff),
    viewer: OrderViewer = Depends(get_order_viewer),
):
    return [to_order_view(r) for r in await viewer.get_recent_orders()]


@router.get(
    "/orders/{order_id}",
    response_model=OrderView,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Get order",
)
async def get_order(
    order_id: str,
    staff: CurrentUser = Depends(require_staff),
    viewer: OrderViewer = Depends(get_order_viewer),
):
    record = await viewer.get_order_by_id(order_id)
    if record is None:
        raise OrderNotFoundException(order_id)
    return to_order_view(record)


@router.patch(
    "/orders/{order_id}/status",
    response_model=OrderView,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Update order status",
)
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    staff: CurrentUser = Depends(require_staff),
    order_service: OrderService = Depends(get_order_service),
):
    updated = await order_service.update_order_status(
        order_id, update.status.value, update.admin_notes, update.tracking_number
    )
    return to_order_view(updated)


@router.get("/orders/{order_id}/items", response_model=List[Dict[str, Any]], summary="Order items")
async def order_items(
    order_id: str,
    staff: CurrentUser = Depends(require_staff),
    viewer: OrderViewer = Depends(get_order_viewer),
):
    return await viewer.get_order_items(order_id)


@router.get("/products", response_model=List[Dict[str, Any]], summary="List all products")
async def list_admin_products(
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    admin: CurrentUser = Depends(require_admin),
    product_admin: ProductAdminService = Depends(get_product_admin_service),
):
    return await product_admin.list_products(search, category_id)


@router.post(
    "/products",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Rejected by backend", "model": ErrorResponse}},
    summary="Add product",
)
async def add_product(
    form: ProductForm,
    admin: CurrentUser = Depends(require_admin),
    product_admin: ProductAdminService = Depends(get_product_admin_service),
):
    return await product_admin.add_product(form)


@router.put(
    "/products/{product_id}",
    response_model=Dict[str, Any],
    responses={400: {"description": "Rejected by backend", "model": ErrorResponse}},
    summary="Update product",
)
async def update_product(
    product_id: str,
    form: ProductForm,
    admin: CurrentUser = Depends(require_admin),
    product_admin: ProductAdminService = Depends(get_product_admin_service),
):
    return await product_admin.update_product(product_id, form)


@router.delete("/products/{product_id}", response_model=MessageResponse, summary="Delete product")
async def delete_product(
    product_id: str,
    admin: CurrentUser = Depends(require_admin),
    product_admin: ProductAdminService = Depends(get_product_admin_service),
):
    message = await product_admin.delete_product(product_id)
    return MessageResponse(message=message)
