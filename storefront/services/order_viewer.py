"""
Read-only order reporting for the back office and order history pages.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import structlog

from ..domain.entities import OrderStatus
from ..models import OrderCustomer, OrderSearchCriteria, OrderStatistics, OrderView
from ..repositories.order_repository import IOrderRepository

logger = structlog.get_logger(__name__)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_order_view(record: Dict[str, Any]) -> OrderView:
    """
    Convert an ``order_details`` row, or a mock order, into an order view.

    Mock orders carry ``status`` instead of ``order_status`` and no
    customer columns.
    """
    order_id = str(record.get("id"))
    items = record.get("order_items") or []
    total_items = record.get("total_items")
    if total_items is None:
        total_items = sum(item.get("quantity") or 0 for item in items)

    shipping = record.get("shipping_address") or {}
    return OrderView(
        id=order_id,
        order_number=record.get("order_number"),
        user_id=record.get("user_id"),
        customer=OrderCustomer(
            full_name=record.get("customer_full_name") or shipping.get("full_name"),
            email=record.get("customer_email"),
            phone=record.get("customer_phone") or shipping.get("phone"),
            city=record.get("delivery_city") or shipping.get("city"),
        ),
        shipping_address=record.get("shipping_address"),
        billing_address=record.get("billing_address"),
        total_amount=record.get("total_amount") or 0,
        subtotal=record.get("subtotal"),
        delivery_fee=record.get("delivery_fee"),
        status=record.get("order_status") or record.get("status") or OrderStatus.PENDING.value,
        payment_status=record.get("payment_status"),
        payment_method=record.get("payment_method"),
        customer_notes=record.get("customer_notes"),
        admin_notes=record.get("admin_notes"),
        tracking_number=record.get("tracking_number"),
        estimated_delivery_date=record.get("estimated_delivery_date"),
        actual_delivery_date=record.get("actual_delivery_date"),
        created_at=record.get("created_at"),
        updated_at=record.get("updated_at"),
        items=items,
        total_items=total_items,
        is_mock=order_id.startswith("mock-"),
    )


def filter_orders(
    views: Iterable[OrderView], search_term: str = "", status: str = "all"
) -> List[OrderView]:
    """
    Filter order views the way the back office order list does.

    Args:
        views: Orders to filter
        search_term: Substring of order number, customer name or email
        status: Exact status, or ``all``
    """
    term = (search_term or "").lower()
    result = []
    for view in views:
        haystacks = (view.order_number, view.customer.full_name, view.customer.email)
        matches_search = not term or any(term in (h or "").lower() for h in haystacks)
        matches_status = status in ("all", "", None) or view.status == status
        if matches_search and matches_status:
            result.append(view)
    return result


class OrderViewer:
    """
    Order reporting queries.

    Attributes:
        order_repo: Remote order repository
        recent_days: Window of the recent orders listing and statistic
    """

    def __init__(self, order_repo: IOrderRepository, recent_days: int = 30):
        self.order_repo = order_repo
        self.recent_days = recent_days

    def _recent_cutoff(self) -> datetime:
        return datetime.now(timezone.utc) - timedelta(days=self.recent_days)

    async def get_all_orders(self) -> List[Dict[str, Any]]:
        return await self.order_repo.search()

    async def get_order_by_id(self, order_id: str) -> Optional[Dict[str, Any]]:
        return await self.order_repo.get(order_id)

    async def get_orders_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        return await self.order_repo.search(OrderSearchCriteria(user_id=user_id))

    async def get_orders_by_status(self, status: OrderStatus) -> List[Dict[str, Any]]:
        return await self.order_repo.search(OrderSearchCriteria(status=status))

    async def search_orders(self, criteria: OrderSearchCriteria) -> List[Dict[str, Any]]:
        return await self.order_repo.search(criteria)

    async def get_order_items(self, order_id: str) -> List[Dict[str, Any]]:
        """Item snapshot of an order; empty when the order does not exist."""
        return await self.order_repo.get_items(order_id)

    async def get_recent_orders(self) -> List[Dict[str, Any]]:
        """Orders created within the recent window, newest first."""
        return await self.order_repo.search(OrderSearchCriteria(created_after=self._recent_cutoff()))

    async def get_order_statistics(self) -> OrderStatistics:
        """
        Aggregate order counts and revenue.

        Revenue sums ``total_amount`` over every order regardless of status.
        """
        rows = await self.order_repo.summary_rows()
        cutoff = self._recent_cutoff()

        status_counts: Dict[str, int] = {}
        total_revenue = 0.0
        recent_orders = 0

        for row in rows:
            status = row.get("order_status") or "unknown"
            status_counts[status] = status_counts.get(status, 0) + 1

            if row.get("total_amount"):
                total_revenue += float(row["total_amount"])

            created_at = _parse_timestamp(row.get("created_at"))
            if created_at and created_at > cutoff:
                recent_orders += 1

        logger.debug("Order statistics calculated", total_orders=len(rows))
        return OrderStatistics(
            total_orders=len(rows),
            total_revenue=total_revenue,
            status_counts=status_counts,
            recent_orders=recent_orders,
        )
