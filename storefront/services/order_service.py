"""
Order service.

Creates orders as single denormalised ``order_details`` rows, keeps mock
orders locally when the backend cannot be reached and answers order
lookups with a remote, mock, placeholder fallback chain.
"""

import random
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from ..domain.entities import OrderStatus, PaymentStatus
from ..exceptions import BackendUnavailableException, OrderNotFoundException, ValidationException
from ..metrics import track_fallback, track_order_created, track_order_status_update
from ..models import CartItemView, OrderDraft, OrderResult, OrderSearchCriteria
from ..repositories.order_repository import IOrderRepository, MockOrderRepository
from ..utils import make_order_number, now_ms

logger = structlog.get_logger(__name__)

_BASE36 = string.ascii_lowercase + string.digits


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unit_price(item: CartItemView) -> float:
    product = item.product or {}
    return product.get("price") or item.price or 0


def _first_image(product: Dict[str, Any]) -> Optional[str]:
    images = product.get("product_images") or []
    return images[0].get("image_url") if images else None


def snapshot_item(item: CartItemView) -> Dict[str, Any]:
    """Freeze a cart line into the item snapshot stored on the order."""
    product = item.product or {}
    unit_price = _unit_price(item)
    return {
        "product_id": item.product_id,
        "product_name": product.get("name") or f"Product {item.product_id}",
        "product_sku": product.get("sku") or "N/A",
        "product_image": _first_image(product),
        "quantity": item.quantity,
        "unit_price": unit_price,
        "total_price": unit_price * item.quantity,
        "product_specifications": product.get("specifications") or {},
        "product_features": product.get("features") or [],
        "warranty_months": product.get("warranty_months") or 12,
    }


class OrderService:
    """
    Order creation, lookup and status maintenance.

    Attributes:
        order_repo: Remote order repository
        mock_repo: Local store of mock orders
        order_number_prefix: Prefix of generated order numbers
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        mock_repo: MockOrderRepository,
        order_number_prefix: str = "MUS",
        rng: Optional[random.Random] = None,
    ):
        self.order_repo = order_repo
        self.mock_repo = mock_repo
        self.order_number_prefix = order_number_prefix
        self._rng = rng or random.Random()

    def build_order_record(
        self, order_number: str, order_data: OrderDraft, cart_items: List[CartItemView]
    ) -> Dict[str, Any]:
        """Build the ``order_details`` row for an order."""
        shipping = order_data.shipping_address or {}
        return {
            "order_number": order_number,
            "user_id": order_data.user_id,
            "customer_full_name": shipping.get("full_name") or "N/A",
            "customer_phone": shipping.get("phone") or "N/A",
            "customer_email": order_data.user_email or "N/A",
            "shipping_address": shipping,
            "billing_address": order_data.billing_address or shipping,
            "order_date": _now_iso(),
            "order_status": OrderStatus.PENDING.value,
            "payment_status": PaymentStatus.PENDING.value,
            "payment_method": order_data.payment_method,
            "subtotal": order_data.subtotal or order_data.total_amount,
            "delivery_fee": order_data.delivery_fee or 0,
            "total_amount": order_data.total_amount,
            "delivery_city": shipping.get("city"),
            "delivery_postal_code": shipping.get("postal_code"),
            "customer_notes": order_data.customer_notes,
            "special_instructions": order_data.customer_notes,
            "admin_notes": None,
            "tracking_number": None,
            "estimated_delivery_date": None,
            "actual_delivery_date": None,
            "order_items": [snapshot_item(item) for item in cart_items],
            "total_items": sum(item.quantity for item in cart_items),
        }

    async def create_order(self, order_data: OrderDraft, cart_items: List[CartItemView]) -> OrderResult:
        """
        Create an order in the backend.

        Failures are reported in the result rather than raised so that the
        caller can fall back to a mock order.

        Raises:
            ValidationException: If the order has no user
        """
        order_number = make_order_number(self.order_number_prefix)

        if not order_data.user_id:
            raise ValidationException("user_id", None, "User ID is required to create an order")

        record = self.build_order_record(order_number, order_data, cart_items)

        try:
            stored = await self.order_repo.insert(record)
        except BackendUnavailableException as e:
            logger.warning("Order creation failed", order_number=order_number, error=e.message)
            return OrderResult(
                success=False,
                order_number=order_number,
                message="Order creation failed",
                error=e.message,
            )

        track_order_created(is_mock=False)
        logger.info(
            "Order created",
            order_id=stored.get("id"),
            order_number=order_number,
            user_id=order_data.user_id,
            total_items=record["total_items"],
        )
        return OrderResult(
            success=True,
            order_id=str(stored.get("id")),
            order_number=order_number,
            message="Order created successfully",
        )

    def create_mock_order(self, order_data: OrderDraft, cart_items: List[CartItemView]) -> OrderResult:
        """Record an order in the local mock store."""
        timestamp = now_ms()
        order_number = make_order_number(self.order_number_prefix, timestamp)
        order_id = f"mock-{timestamp}"

        items = []
        for item in cart_items:
            snapshot = snapshot_item(item)
            suffix = "".join(self._rng.choices(_BASE36, k=9))
            items.append(
                {
                    "id": f"mock-item-{timestamp}-{suffix}",
                    "product_id": snapshot["product_id"],
                    "quantity": snapshot["quantity"],
                    "unit_price": snapshot["unit_price"],
                    "total_price": snapshot["total_price"],
                    "product_name": snapshot["product_name"],
                    "product_sku": snapshot["product_sku"],
                    "product_image": snapshot["product_image"],
                }
            )

        mock_order = {
            "id": order_id,
            "order_number": order_number,
            "user_id": order_data.user_id or "mock-user",
            "total_amount": order_data.total_amount,
            "subtotal": order_data.subtotal or order_data.total_amount,
            "delivery_fee": order_data.delivery_fee or 0,
            "shipping_address": order_data.shipping_address,
            "billing_address": order_data.billing_address,
            "customer_notes": order_data.customer_notes,
            "payment_method": order_data.payment_method,
            "status": OrderStatus.PENDING.value,
            "created_at": _now_iso(),
            "order_items": items,
        }
        self.mock_repo.append(mock_order)

        track_order_created(is_mock=True)
        logger.info("Mock order created", order_id=order_id, order_number=order_number)
        return OrderResult(
            success=True,
            order_id=order_id,
            order_number=order_number,
            message="Mock order created successfully",
            is_mock=True,
        )

    async def fetch_order_details(self, order_id: str) -> Dict[str, Any]:
        """
        Fetch an order from the backend.

        Raises:
            OrderNotFoundException: If the order does not exist
        """
        order = await self.order_repo.get(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)
        return order

    def placeholder_order(self, order_id: str) -> Dict[str, Any]:
        """Minimal order shown when an order cannot be found anywhere."""
        return {
            "id": order_id,
            "order_number": f"{self.order_number_prefix}-{order_id[-6:]}",
            "total_amount": 0,
            "status": OrderStatus.PENDING.value,
            "created_at": _now_iso(),
            "shipping_address": {},
            "payment_method": "cash_on_delivery",
            "order_items": [],
        }

    async def find_order(self, order_id: str) -> Dict[str, Any]:
        """
        Look an order up in the backend, then the mock store.

        Never fails: an order that cannot be found anywhere is answered
        with a placeholder so the confirmation page can still render.
        """
        try:
            order = await self.order_repo.get(order_id)
            if order is not None:
                return order
        except BackendUnavailableException as e:
            logger.warning("Order lookup failed, checking mock orders", order_id=order_id, error=e.message)
            track_fallback("find_order")

        mock_order = self.mock_repo.find(order_id)
        if mock_order is not None:
            return mock_order

        logger.info("Order not found, returning placeholder", order_id=order_id)
        return self.placeholder_order(order_id)

    async def update_order_status(
        self,
        order_id: str,
        status: str,
        admin_notes: Optional[str] = None,
        tracking_number: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Update the status of an order.

        Raises:
            ValidationException: If status is not a known order status
            OrderNotFoundException: If the order does not exist
        """
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationException("status", status, "Unknown order status")

        updated = await self.order_repo.update(
            order_id,
            {
                "order_status": new_status.value,
                "admin_notes": admin_notes,
                "tracking_number": tracking_number,
                "updated_at": _now_iso(),
            },
        )

        track_order_status_update(new_status.value)
        logger.info("Order status updated", order_id=order_id, status=new_status.value)
        return updated

    async def get_all_orders(self) -> List[Dict[str, Any]]:
        """All orders, newest first."""
        return await self.order_repo.search()

    async def get_orders_by_user(self, user_id: str, include_mock: bool = True) -> List[Dict[str, Any]]:
        """
        Orders of one user, newest first.

        Mock orders of the user are included; when the backend cannot be
        reached only the mock orders are returned.
        """
        mock_orders = self.mock_repo.list(user_id) if include_mock else []

        try:
            orders = await self.order_repo.search(OrderSearchCriteria(user_id=user_id))
        except BackendUnavailableException as e:
            if not include_mock:
                raise
            logger.warning("Order history fetch failed, returning mock orders", user_id=user_id, error=e.message)
            track_fallback("get_orders_by_user")
            orders = []

        combined = orders + mock_orders
        combined.sort(key=lambda o: o.get("created_at") or "", reverse=True)
        return combined

    async def search_orders(self, criteria: OrderSearchCriteria) -> List[Dict[str, Any]]:
        """Orders matching the search criteria, newest first."""
        return await self.order_repo.search(criteria)
