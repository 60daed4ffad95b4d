"""
Cart repositories.

Signed-in carts live in the ``cart_items`` table. Guest carts, and the
fallback copy of a signed-in cart, live in the local document store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..local_store import LocalStore, cart_key
from .base import SupabaseRepository

CART_SELECT = "*, products (id, name, price, sku, product_images (image_url))"


class ICartRepository(ABC):
    """Abstract repository interface for server-side carts."""

    @abstractmethod
    async def fetch(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Fetch the cart lines of a user.

        Args:
            user_id: Owner of the cart

        Returns:
            Cart lines with the joined ``products`` record
        """
        pass

    @abstractmethod
    async def upsert(self, user_id: str, lines: List[Dict[str, Any]]) -> None:
        """
        Insert or replace cart lines, keyed on (user_id, product_id).

        Args:
            user_id: Owner of the cart
            lines: Lines with ``product_id`` and ``quantity``
        """
        pass

    @abstractmethod
    async def delete_item(self, user_id: str, product_id: str) -> None:
        """Delete one line of a user's cart."""
        pass

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        """Delete every line of a user's cart."""
        pass


class SupabaseCartRepository(SupabaseRepository, ICartRepository):
    """Server-side cart stored in the ``cart_items`` table."""

    async def fetch(self, user_id: str) -> List[Dict[str, Any]]:
        return self._execute(
            "fetch_cart",
            lambda client: client.table("cart_items").select(CART_SELECT).eq("user_id", user_id),
        ) or []

    async def upsert(self, user_id: str, lines: List[Dict[str, Any]]) -> None:
        if not lines:
            return

        rows = [
            {
                "user_id": user_id,
                "product_id": line["product_id"],
                "quantity": line["quantity"],
            }
            for line in lines
        ]
        self._execute(
            "upsert_cart",
            lambda client: client.table("cart_items").upsert(rows, on_conflict="user_id,product_id"),
        )

    async def delete_item(self, user_id: str, product_id: str) -> None:
        self._execute(
            "delete_cart_item",
            lambda client: client.table("cart_items")
            .delete()
            .eq("user_id", user_id)
            .eq("product_id", product_id),
        )

    async def clear(self, user_id: str) -> None:
        self._execute(
            "clear_cart",
            lambda client: client.table("cart_items").delete().eq("user_id", user_id),
        )


class LocalCartRepository:
    """Cart lines kept in the local document store under ``musicstore_cart:<owner>``."""

    def __init__(self, store: LocalStore):
        self.store = store

    def load(self, owner: str) -> List[Dict[str, Any]]:
        lines = self.store.get(cart_key(owner), [])
        return lines if isinstance(lines, list) else []

    def save(self, owner: str, lines: List[Dict[str, Any]]) -> None:
        self.store.set(cart_key(owner), lines)

    def remove(self, owner: str) -> bool:
        return self.store.remove(cart_key(owner))
