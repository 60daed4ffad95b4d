"""
Back office product maintenance through the backend's stored functions.
"""

import random
from typing import Any, Dict, List, Optional

import structlog

from ..models import ProductForm
from ..repositories.product_repository import IProductAdminRepository
from ..utils import generate_sku
from .catalog_service import CatalogService

logger = structlog.get_logger(__name__)


def split_features(features: str) -> List[str]:
    """Split a comma-separated feature string, dropping empty entries."""
    return [feature.strip() for feature in (features or "").split(",") if feature.strip()]


class ProductAdminService:
    """
    Product CRUD for staff.

    Attributes:
        admin_repo: Stored-function repository
        catalog: Catalog used to resolve category and brand names for SKUs
    """

    def __init__(
        self,
        admin_repo: IProductAdminRepository,
        catalog: CatalogService,
        rng: Optional[random.Random] = None,
    ):
        self.admin_repo = admin_repo
        self.catalog = catalog
        self._rng = rng

    async def list_products(
        self, search: Optional[str] = None, category_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        All products, including inactive ones.

        Args:
            search: Substring of product name or SKU
            category_id: Category id, or ``all``/None for every category
        """
        products = await self.admin_repo.list_all()
        term = (search or "").lower()

        result = []
        for product in products:
            if term and term not in (product.get("name") or "").lower() and term not in (
                product.get("sku") or ""
            ).lower():
                continue
            if category_id and category_id != "all":
                product_category = product.get("category_id") or (product.get("category") or {}).get("id")
                if str(product_category) != str(category_id):
                    continue
            result.append(product)
        return result

    async def _lookup_name(self, rows: List[Dict[str, Any]], row_id: Optional[str]) -> str:
        for row in rows:
            if str(row.get("id")) == str(row_id):
                return row.get("name") or ""
        return ""

    async def _resolve_sku(self, form: ProductForm) -> str:
        if form.sku.strip():
            return form.sku.strip()

        category = await self._lookup_name(await self.catalog.list_categories(), form.category_id)
        brand = await self._lookup_name(await self.catalog.list_brands(), form.brand_id)
        return generate_sku(category or str(form.category_id), brand, form.name, rng=self._rng)

    async def _params(self, form: ProductForm) -> Dict[str, Any]:
        return {
            "p_name": form.name,
            "p_description": form.description,
            "p_price": form.price,
            "p_category_id": form.category_id,
            "p_brand_id": form.brand_id,
            "p_sku": await self._resolve_sku(form),
            "p_suitable_for": [level.value for level in form.suitable_for],
            "p_features": split_features(form.features),
            "p_warranty_months": form.warranty_months,
            "p_quantity_available": form.quantity_available,
        }

    async def add_product(self, form: ProductForm) -> Dict[str, Any]:
        """
        Create a product.

        Raises:
            BackendRejectedException: If the backend refuses the product
        """
        params = await self._params(form)
        params["p_image_url"] = form.image_url or None

        result = await self.admin_repo.add(params)
        logger.info("Product added", name=form.name, sku=params["p_sku"])
        return result

    async def update_product(self, product_id: str, form: ProductForm) -> Dict[str, Any]:
        """
        Update a product.

        Raises:
            BackendRejectedException: If the backend refuses the update
        """
        params = await self._params(form)
        params["p_product_id"] = product_id

        result = await self.admin_repo.update(params)
        logger.info("Product updated", product_id=product_id)
        return result

    async def delete_product(self, product_id: str) -> str:
        """Delete a product and return the backend's message."""
        result = await self.admin_repo.delete(product_id)
        logger.info("Product deleted", product_id=product_id)
        return result.get("message") or "Product deleted successfully"
