"""Business logic services."""

from .cart_service import CartService
from .catalog_service import CatalogService
from .checkout_service import CheckoutService
from .order_service import OrderService
from .order_viewer import OrderViewer
from .product_admin_service import ProductAdminService
from .profile_service import ProfileService
from .wishlist_service import WishlistService

__all__ = [
    "CartService",
    "CatalogService",
    "CheckoutService",
    "OrderService",
    "OrderViewer",
    "ProductAdminService",
    "ProfileService",
    "WishlistService",
]
