"""
Shared dependencies for the application.

Services are built once at startup and handed to routers through
FastAPI dependency functions.
"""

from dataclasses import dataclass
from typing import Optional

from supabase import Client

from .config import Settings
from .local_store import LocalStore
from .repositories import (
    LocalCartRepository,
    LocalWishlistRepository,
    MockOrderRepository,
    SupabaseCartRepository,
    SupabaseOrderRepository,
    SupabaseProductAdminRepository,
    SupabaseProductRepository,
    SupabaseProfileRepository,
)
from .services import (
    CartService,
    CatalogService,
    CheckoutService,
    OrderService,
    OrderViewer,
    ProductAdminService,
    ProfileService,
    WishlistService,
)


@dataclass
class ServiceContainer:
    """All services used by the routers."""

    catalog: CatalogService
    cart: CartService
    orders: OrderService
    order_viewer: OrderViewer
    checkout: CheckoutService
    wishlist: WishlistService
    profile: ProfileService
    product_admin: ProductAdminService


def build_services(client: Optional[Client], store: LocalStore, settings: Settings) -> ServiceContainer:
    """
    Wire repositories and services.

    Args:
        client: Supabase client, or None to run entirely on local fallbacks
        store: Local document store for guest carts, wishlists and mock orders
        settings: Application settings
    """
    catalog = CatalogService(SupabaseProductRepository(client), cache_ttl=settings.CATALOG_CACHE_TTL)
    cart = CartService(
        SupabaseCartRepository(client),
        LocalCartRepository(store),
        catalog,
        default_item_price=settings.DEFAULT_ITEM_PRICE,
    )
    order_repo = SupabaseOrderRepository(client)
    orders = OrderService(order_repo, MockOrderRepository(store), settings.ORDER_NUMBER_PREFIX)

    return ServiceContainer(
        catalog=catalog,
        cart=cart,
        orders=orders,
        order_viewer=OrderViewer(order_repo, recent_days=settings.RECENT_ORDER_DAYS),
        checkout=CheckoutService(
            cart,
            orders,
            free_delivery_threshold=settings.FREE_DELIVERY_THRESHOLD,
            delivery_fee_amount=settings.DELIVERY_FEE,
        ),
        wishlist=WishlistService(LocalWishlistRepository(store), catalog),
        profile=ProfileService(SupabaseProfileRepository(client)),
        product_admin=ProductAdminService(SupabaseProductAdminRepository(client), catalog),
    )


# Global service container (set by main app)
_services: Optional[ServiceContainer] = None


def set_services(services: Optional[ServiceContainer]) -> None:
    """
    Set the global service container.

    Called by main app during startup.
    """
    global _services
    _services = services


def get_services() -> ServiceContainer:
    if _services is None:
        raise RuntimeError("Services not initialized")
    return _services


async def get_catalog_service() -> CatalogService:
    return get_services().catalog


async def get_cart_service() -> CartService:
    return get_services().cart


async def get_order_service() -> OrderService:
    return get_services().orders


async def get_order_viewer() -> OrderViewer:
    return get_services().order_viewer


async def get_checkout_service() -> CheckoutService:
    return get_services().checkout


async def get_wishlist_service() -> WishlistService:
    return get_services().wishlist


async def get_profile_service() -> ProfileService:
    return get_services().profile


async def get_product_admin_service() -> ProductAdminService:
    return get_services().product_admin
