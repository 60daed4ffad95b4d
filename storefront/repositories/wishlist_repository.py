"""Wishlist repository over the local document store."""

from typing import Any, Dict, List

from ..local_store import LocalStore, wishlist_key


class LocalWishlistRepository:
    """Wishlist entries kept under ``musicstore_wishlist:<owner>``, newest first."""

    def __init__(self, store: LocalStore):
        self.store = store

    def load(self, owner: str) -> List[Dict[str, Any]]:
        entries = self.store.get(wishlist_key(owner), [])
        return entries if isinstance(entries, list) else []

    def save(self, owner: str, entries: List[Dict[str, Any]]) -> None:
        self.store.set(wishlist_key(owner), entries)
