"""Wishlist service over the local document store."""

from datetime import datetime, timezone
from typing import List

import structlog

from ..domain.entities import CartOwner
from ..exceptions import WishlistItemExistsException
from ..models import WishlistEntry, WishlistResponse
from ..repositories.wishlist_repository import LocalWishlistRepository
from .catalog_service import CatalogService

logger = structlog.get_logger(__name__)


class WishlistService:
    """Per-owner wishlist, newest entry first."""

    def __init__(self, wishlist_repo: LocalWishlistRepository, catalog: CatalogService):
        self.wishlist_repo = wishlist_repo
        self.catalog = catalog

    async def list(self, owner: CartOwner) -> WishlistResponse:
        """
        Wishlist entries with product information.

        Entries whose product no longer exists are left out.
        """
        items: List[WishlistEntry] = []
        for entry in self.wishlist_repo.load(owner.storage_key):
            product = await self.catalog.find_product(entry["product_id"])
            if product is None:
                continue
            items.append(
                WishlistEntry(product_id=str(entry["product_id"]), added_at=entry.get("added_at"), product=product)
            )
        return WishlistResponse(items=items, count=len(items))

    def contains(self, owner: CartOwner, product_id: str) -> bool:
        return any(
            str(entry.get("product_id")) == str(product_id)
            for entry in self.wishlist_repo.load(owner.storage_key)
        )

    def count(self, owner: CartOwner) -> int:
        return len(self.wishlist_repo.load(owner.storage_key))

    async def add(self, owner: CartOwner, product_id: str) -> WishlistResponse:
        """
        Add a product to the front of the wishlist.

        Raises:
            WishlistItemExistsException: If the product is already on the wishlist
            ProductNotFoundException: If the product does not exist
        """
        if self.contains(owner, product_id):
            raise WishlistItemExistsException(product_id)

        await self.catalog.get_product(product_id)

        entries = self.wishlist_repo.load(owner.storage_key)
        entries.insert(
            0, {"product_id": str(product_id), "added_at": datetime.now(timezone.utc).isoformat()}
        )
        self.wishlist_repo.save(owner.storage_key, entries)

        logger.info("Added to wishlist", owner=owner.id, product_id=product_id)
        return await self.list(owner)

    async def remove(self, owner: CartOwner, product_id: str) -> WishlistResponse:
        """Remove a product from the wishlist; removing a missing product is a no-op."""
        entries = [
            entry
            for entry in self.wishlist_repo.load(owner.storage_key)
            if str(entry.get("product_id")) != str(product_id)
        ]
        self.wishlist_repo.save(owner.storage_key, entries)
        return await self.list(owner)
