"""
Order repositories.

Orders are stored as single denormalised rows in ``order_details``; the
line items are an ``order_items`` JSON snapshot on the row. Orders that
could not be written remotely are kept as mock orders in the local store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..exceptions import OrderNotFoundException
from ..local_store import MOCK_ORDERS_KEY, LocalStore
from ..models import OrderSearchCriteria
from .base import SupabaseRepository

ORDER_TABLE = "order_details"


class IOrderRepository(ABC):
    """Abstract repository interface for persisted orders."""

    @abstractmethod
    async def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert an order record.

        Args:
            record: Complete ``order_details`` row without ``id``

        Returns:
            The stored row, including its generated ``id``
        """
        pass

    @abstractmethod
    async def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        """Get an order row, or None if it does not exist."""
        pass

    @abstractmethod
    async def update(self, order_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update columns of an order.

        Raises:
            OrderNotFoundException: If no row has this id
        """
        pass

    @abstractmethod
    async def search(self, criteria: Optional[OrderSearchCriteria] = None) -> List[Dict[str, Any]]:
        """
        List orders matching the criteria, newest first.

        Text criteria match case-insensitive substrings; status matches exactly.
        """
        pass

    @abstractmethod
    async def get_items(self, order_id: str) -> List[Dict[str, Any]]:
        """Get the item snapshot of an order; empty when the order is missing."""
        pass

    @abstractmethod
    async def summary_rows(self) -> List[Dict[str, Any]]:
        """Get ``order_status``, ``total_amount`` and ``created_at`` of every order."""
        pass


class SupabaseOrderRepository(SupabaseRepository, IOrderRepository):
    """Orders stored in the ``order_details`` table."""

    async def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute(
            "insert_order",
            lambda client: client.table(ORDER_TABLE).insert(record),
        )
        return rows[0] if rows else dict(record)

    async def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            "get_order",
            lambda client: client.table(ORDER_TABLE).select("*").eq("id", order_id).limit(1),
        )
        return rows[0] if rows else None

    async def update(self, order_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute(
            "update_order",
            lambda client: client.table(ORDER_TABLE).update(fields).eq("id", order_id),
        )
        if not rows:
            raise OrderNotFoundException(order_id)
        return rows[0]

    async def search(self, criteria: Optional[OrderSearchCriteria] = None) -> List[Dict[str, Any]]:
        criteria = criteria or OrderSearchCriteria()

        def build(client):
            query = client.table(ORDER_TABLE).select("*")

            if criteria.user_id:
                query = query.eq("user_id", criteria.user_id)
            if criteria.order_number:
                query = query.ilike("order_number", f"%{criteria.order_number}%")
            if criteria.customer_name:
                query = query.ilike("customer_full_name", f"%{criteria.customer_name}%")
            if criteria.customer_phone:
                query = query.ilike("customer_phone", f"%{criteria.customer_phone}%")
            if criteria.city:
                query = query.ilike("delivery_city", f"%{criteria.city}%")
            if criteria.status:
                query = query.eq("order_status", criteria.status.value)
            if criteria.created_after:
                query = query.gte("created_at", criteria.created_after.isoformat())

            return query.order("created_at", desc=True)

        return self._execute("search_orders", build) or []

    async def get_items(self, order_id: str) -> List[Dict[str, Any]]:
        rows = self._execute(
            "get_order_items",
            lambda client: client.table(ORDER_TABLE).select("order_items").eq("id", order_id).limit(1),
        )
        if not rows:
            return []
        return rows[0].get("order_items") or []

    async def summary_rows(self) -> List[Dict[str, Any]]:
        return self._execute(
            "order_statistics",
            lambda client: client.table(ORDER_TABLE).select("order_status, total_amount, created_at"),
        ) or []


class MockOrderRepository:
    """Orders created while the backend was unreachable, kept under ``mock_orders``."""

    def __init__(self, store: LocalStore):
        self.store = store

    def list(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        orders = self.store.get(MOCK_ORDERS_KEY, [])
        if not isinstance(orders, list):
            return []
        if user_id is not None:
            orders = [o for o in orders if o.get("user_id") == user_id]
        return orders

    def append(self, order: Dict[str, Any]) -> None:
        orders = self.list()
        orders.append(order)
        self.store.set(MOCK_ORDERS_KEY, orders)

    def find(self, order_id: str) -> Optional[Dict[str, Any]]:
        for order in self.list():
            if order.get("id") == order_id:
                return order
        return None
