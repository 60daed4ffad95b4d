"""HTTP routers."""

from . import (
    admin_router,
    cart_router,
    catalog_router,
    checkout_router,
    health_router,
    orders_router,
    profile_router,
    wishlist_router,
)

__all__ = [
    "admin_router",
    "cart_router",
    "catalog_router",
    "checkout_router",
    "health_router",
    "orders_router",
    "profile_router",
    "wishlist_router",
]
