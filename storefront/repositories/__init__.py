"""Repository layer: Supabase-backed and local-store implementations."""

from .base import SupabaseRepository
from .cart_repository import ICartRepository, LocalCartRepository, SupabaseCartRepository
from .order_repository import IOrderRepository, MockOrderRepository, SupabaseOrderRepository
from .product_repository import (
    IProductAdminRepository,
    IProductRepository,
    SampleProductRepository,
    SupabaseProductAdminRepository,
    SupabaseProductRepository,
)
from .profile_repository import IProfileRepository, SupabaseProfileRepository
from .wishlist_repository import LocalWishlistRepository

__all__ = [
    "SupabaseRepository",
    "ICartRepository",
    "LocalCartRepository",
    "SupabaseCartRepository",
    "IOrderRepository",
    "MockOrderRepository",
    "SupabaseOrderRepository",
    "IProductAdminRepository",
    "IProductRepository",
    "SampleProductRepository",
    "SupabaseProductAdminRepository",
    "SupabaseProductRepository",
    "IProfileRepository",
    "SupabaseProfileRepository",
    "LocalWishlistRepository",
]
