"""
Catalog service.

Reads products, categories and brands from the hosted backend and falls
back to the built-in sample catalog when the backend is unreachable.
Categories and brands change rarely and are cached in memory.
"""

from threading import Lock
from typing import Any, Dict, List, Optional

import structlog
from cachetools import TTLCache  # type: ignore[import-untyped]

from ..domain.entities import SkillLevel
from ..exceptions import BackendUnavailableException, ProductNotFoundException
from ..metrics import track_fallback
from ..models import ProductFilters
from ..repositories.product_repository import IProductRepository, SampleProductRepository

logger = structlog.get_logger(__name__)


class CatalogService:
    """
    Catalog reads with sample-data fallback.

    Attributes:
        product_repo: Remote catalog repository
        fallback_repo: Sample catalog used when the remote call fails
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        fallback_repo: Optional[IProductRepository] = None,
        cache_ttl: int = 300,
    ):
        """
        Initialize catalog service.

        Args:
            product_repo: Remote catalog repository
            fallback_repo: Fallback repository, the sample catalog by default
            cache_ttl: Seconds categories and brands stay cached
        """
        self.product_repo = product_repo
        self.fallback_repo = fallback_repo or SampleProductRepository()
        self._cache: TTLCache = TTLCache(maxsize=16, ttl=cache_ttl)
        self._cache_lock = Lock()

    async def list_products(self, filters: ProductFilters, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        List active products matching the filters.

        Returns:
            Product records; sample products when the backend is unavailable
        """
        products, _ = await self.list_products_with_source(filters, limit)
        return products

    async def list_products_with_source(
        self, filters: ProductFilters, limit: Optional[int] = None
    ) -> tuple[List[Dict[str, Any]], str]:
        """List products and report whether they came from ``remote`` or ``sample``."""
        try:
            return await self.product_repo.search(filters, limit), "remote"
        except BackendUnavailableException as e:
            logger.warning("Product listing failed, serving sample catalog", error=e.message)
            track_fallback("list_products")
            return await self.fallback_repo.search(filters, limit), "sample"

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        """
        Get a single product.

        Raises:
            ProductNotFoundException: If neither the backend nor the sample catalog has it
        """
        product = None
        try:
            product = await self.product_repo.get(product_id)
        except BackendUnavailableException as e:
            logger.warning("Product lookup failed, trying sample catalog", product_id=product_id, error=e.message)
            track_fallback("get_product")
            product = await self.fallback_repo.get(product_id)

        if product is None:
            raise ProductNotFoundException(product_id)
        return product

    async def find_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Get a product, or None when it does not exist anywhere."""
        try:
            return await self.get_product(product_id)
        except ProductNotFoundException:
            return None

    async def price_of(self, product_id: str) -> Optional[float]:
        """Catalog price of a product, or None when the product is unknown."""
        product = await self.find_product(product_id)
        if product is None or product.get("price") is None:
            return None
        return product["price"]

    async def _cached(self, key: str, loader, fallback) -> List[Dict[str, Any]]:
        with self._cache_lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            rows = await loader()
        except BackendUnavailableException as e:
            logger.warning("Catalog lookup failed, serving sample data", lookup=key, error=e.message)
            track_fallback(f"list_{key}")
            return await fallback()

        with self._cache_lock:
            self._cache[key] = rows
        return rows

    async def list_categories(self) -> List[Dict[str, Any]]:
        """Active categories in display order."""
        return await self._cached(
            "categories", self.product_repo.list_categories, self.fallback_repo.list_categories
        )

    async def list_brands(self) -> List[Dict[str, Any]]:
        """Active brands ordered by name."""
        return await self._cached("brands", self.product_repo.list_brands, self.fallback_repo.list_brands)

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    async def featured_products(self, limit: int = 8) -> List[Dict[str, Any]]:
        """First ``limit`` active products in catalog order."""
        return await self.list_products(ProductFilters(), limit=limit)

    async def recommended_products(self, skill_level: SkillLevel, limit: int = 4) -> List[Dict[str, Any]]:
        """Products suited to a skill level."""
        return await self.list_products(ProductFilters(skill_level=skill_level), limit=limit)
