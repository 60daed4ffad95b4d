"""
Catalog router: products, categories, brands and delivery cities.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..dependencies import get_catalog_service
from ..domain.entities import SRI_LANKAN_CITIES, ProductSort, SkillLevel
from ..models import ErrorResponse, ProductFilters, ProductListResponse
from ..services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/products", response_model=ProductListResponse, summary="List products")
async def list_products(
    search: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None, description="Category slug"),
    brand: Optional[str] = Query(None, description="Brand name"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    skill_level: Optional[SkillLevel] = None,
    sort_by: ProductSort = ProductSort.NAME,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    List active products.

    Served from the sample catalog when the backend is unavailable;
    ``source`` tells which.
    """
    filters = ProductFilters(
        search=search,
        category=category,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        skill_level=skill_level,
        sort_by=sort_by,
    )
    products, source = await catalog.list_products_with_source(filters)
    return ProductListResponse(products=products, total=len(products), source=source)


@router.get("/products/featured", response_model=List[Dict[str, Any]], summary="Featured products")
async def featured_products(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.featured_products(settings.FEATURED_PRODUCTS_LIMIT)


@router.get("/products/recommended", response_model=List[Dict[str, Any]], summary="Recommended products")
async def recommended_products(
    skill_level: SkillLevel = SkillLevel.BEGINNER,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Products suited to a skill level."""
    return await catalog.recommended_products(skill_level, settings.RECOMMENDED_PRODUCTS_LIMIT)


@router.get(
    "/products/{product_id}",
    response_model=Dict[str, Any],
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Get product",
)
async def get_product(product_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.get_product(product_id)


@router.get("/categories", response_model=List[Dict[str, Any]], summary="List categories")
async def list_categories(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.list_categories()


@router.get("/brands", response_model=List[Dict[str, Any]], summary="List brands")
async def list_brands(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.list_brands()


@router.get("/cities", response_model=List[str], summary="Delivery cities")
async def list_cities():
    return SRI_LANKAN_CITIES
