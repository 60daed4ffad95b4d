"""
Product catalog repositories.

``SupabaseProductRepository`` reads the hosted catalog;
``SampleProductRepository`` answers the same queries from the built-in
sample catalog when the backend cannot be reached.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..domain.entities import ProductSort
from ..models import ProductFilters
from ..sample_data import SAMPLE_BRANDS, SAMPLE_CATEGORIES, SAMPLE_PRODUCTS
from .base import SupabaseRepository

# Sort option -> (column, descending)
SORT_COLUMNS = {
    ProductSort.NAME: ("name", False),
    ProductSort.PRICE_LOW: ("price", False),
    ProductSort.PRICE_HIGH: ("price", True),
    ProductSort.NEWEST: ("created_at", True),
    ProductSort.POPULAR: ("total_sales", True),
}


def product_select(filters: Optional[ProductFilters] = None) -> str:
    """
    Build the select clause for product queries.

    Embedded resources that are filtered on must be inner joins, otherwise
    PostgREST filters the embedded rows instead of the products.
    """
    category_join = "categories!inner" if filters and filters.category else "categories"
    brand_join = "brands!inner" if filters and filters.brand else "brands"
    return (
        f"*, {brand_join} (name), "
        "product_images (image_url, is_primary, alt_text), "
        f"{category_join} (name, slug), "
        "inventory (quantity_available)"
    )


class IProductRepository(ABC):
    """Abstract repository interface for catalog reads."""

    @abstractmethod
    async def search(self, filters: ProductFilters, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        List active products matching the filters.

        Args:
            filters: Catalog filters and sort order
            limit: Maximum number of products, unlimited when None

        Returns:
            Product records with brand, category and image information
        """
        pass

    @abstractmethod
    async def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Get a single product, or None if it does not exist."""
        pass

    @abstractmethod
    async def list_categories(self) -> List[Dict[str, Any]]:
        """List active categories in display order."""
        pass

    @abstractmethod
    async def list_brands(self) -> List[Dict[str, Any]]:
        """List active brands ordered by name."""
        pass


class SupabaseProductRepository(SupabaseRepository, IProductRepository):
    """Catalog reads against the ``products``, ``categories`` and ``brands`` tables."""

    async def search(self, filters: ProductFilters, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        def build(client):
            query = client.table("products").select(product_select(filters)).eq("is_active", True)

            if filters.search:
                term = filters.search.replace(",", " ")
                query = query.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")
            if filters.category:
                query = query.eq("categories.slug", filters.category)
            if filters.brand:
                query = query.eq("brands.name", filters.brand)
            if filters.min_price is not None:
                query = query.gte("price", filters.min_price)
            if filters.max_price is not None:
                query = query.lte("price", filters.max_price)
            if filters.skill_level:
                query = query.contains("suitable_for", [filters.skill_level.value])

            column, descending = SORT_COLUMNS[filters.sort_by]
            query = query.order(column, desc=descending)
            if limit is not None:
                query = query.limit(limit)
            return query

        return self._execute("search_products", build) or []

    async def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            "get_product",
            lambda client: client.table("products")
            .select(product_select())
            .eq("id", product_id)
            .limit(1),
        )
        return rows[0] if rows else None

    async def list_categories(self) -> List[Dict[str, Any]]:
        return self._execute(
            "list_categories",
            lambda client: client.table("categories")
            .select("*")
            .eq("is_active", True)
            .order("sort_order"),
        ) or []

    async def list_brands(self) -> List[Dict[str, Any]]:
        return self._execute(
            "list_brands",
            lambda client: client.table("brands")
            .select("*")
            .eq("is_active", True)
            .order("name"),
        ) or []


class SampleProductRepository(IProductRepository):
    """
    Catalog reads over the built-in sample data.

    Applies the same filters as the remote query in process. Newest and
    popular sorting fall back to name order when the sample records lack
    ``created_at`` or ``total_sales``.
    """

    def __init__(
        self,
        products: Optional[List[Dict[str, Any]]] = None,
        categories: Optional[List[Dict[str, Any]]] = None,
        brands: Optional[List[Dict[str, Any]]] = None,
    ):
        self.products = products if products is not None else SAMPLE_PRODUCTS
        self.categories = categories if categories is not None else SAMPLE_CATEGORIES
        self.brands = brands if brands is not None else SAMPLE_BRANDS

    @staticmethod
    def _matches(product: Dict[str, Any], filters: ProductFilters) -> bool:
        if product.get("is_active") is False:
            return False

        if filters.search:
            term = filters.search.lower()
            name = (product.get("name") or "").lower()
            description = (product.get("description") or "").lower()
            if term not in name and term not in description:
                return False

        if filters.category and (product.get("categories") or {}).get("slug") != filters.category:
            return False

        if filters.brand and (product.get("brands") or {}).get("name") != filters.brand:
            return False

        price = product.get("price") or 0
        if filters.min_price is not None and price < filters.min_price:
            return False
        if filters.max_price is not None and price > filters.max_price:
            return False

        if filters.skill_level and filters.skill_level.value not in (product.get("suitable_for") or []):
            return False

        return True

    @staticmethod
    def _sort(products: List[Dict[str, Any]], sort_by: ProductSort) -> List[Dict[str, Any]]:
        column, descending = SORT_COLUMNS[sort_by]
        if column != "name" and not all(column in p for p in products):
            column, descending = "name", False

        if column == "name":
            return sorted(products, key=lambda p: (p.get("name") or "").lower())
        return sorted(products, key=lambda p: p.get(column) or 0, reverse=descending)

    async def search(self, filters: ProductFilters, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        matches = [copy.deepcopy(p) for p in self.products if self._matches(p, filters)]
        matches = self._sort(matches, filters.sort_by)
        return matches[:limit] if limit is not None else matches

    async def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        for product in self.products:
            if str(product.get("id")) == str(product_id):
                return copy.deepcopy(product)
        return None

    async def list_categories(self) -> List[Dict[str, Any]]:
        categories = [c for c in self.categories if c.get("is_active", True)]
        return copy.deepcopy(sorted(categories, key=lambda c: c.get("sort_order") or 0))

    async def list_brands(self) -> List[Dict[str, Any]]:
        brands = [b for b in self.brands if b.get("is_active", True)]
        return copy.deepcopy(sorted(brands, key=lambda b: b.get("name") or ""))


class IProductAdminRepository(ABC):
    """Abstract repository interface for back office product maintenance."""

    @abstractmethod
    async def list_all(self) -> List[Dict[str, Any]]:
        """List every product, including inactive ones."""
        pass

    @abstractmethod
    async def add(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Create a product from ``p_``-prefixed parameters."""
        pass

    @abstractmethod
    async def update(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Update a product from ``p_``-prefixed parameters including ``p_product_id``."""
        pass

    @abstractmethod
    async def delete(self, product_id: str) -> Dict[str, Any]:
        """Delete a product."""
        pass


class SupabaseProductAdminRepository(SupabaseRepository, IProductAdminRepository):
    """Back office product maintenance through stored functions."""

    async def list_all(self) -> List[Dict[str, Any]]:
        data = self._rpc("get_all_products_admin")
        if isinstance(data, dict):
            return data.get("products") or []
        return data or []

    async def add(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc("add_product", params) or {}

    async def update(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc("update_product", params) or {}

    async def delete(self, product_id: str) -> Dict[str, Any]:
        return self._rpc("delete_product", {"p_product_id": product_id}) or {}
