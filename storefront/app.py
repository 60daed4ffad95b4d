"""
Storefront Service - Main Application.

HTTP API of the Harmony House music store: catalog, guest and customer
carts, checkout, order history, wishlist, profiles and the staff back
office. Persistence is delegated to Supabase, with local fallbacks for
carts, wishlists and orders when it cannot be reached.
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .dependencies import build_services, set_services
from .exception_handlers import setup_exception_handlers
from .local_store import FileLocalStore
from .logging_config import setup_logging
from .metrics import track_request_metrics
from .metrics_middleware import PrometheusMiddleware
from .routers import (
    admin_router,
    cart_router,
    catalog_router,
    checkout_router,
    health_router,
    orders_router,
    profile_router,
    wishlist_router,
)
from .supabase_client import get_optional_supabase_client

setup_logging(
    log_level=settings.LOG_LEVEL,
    service_name=settings.SERVICE_NAME,
    use_json=settings.LOG_JSON,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Storefront Service", version=settings.SERVICE_VERSION)

    client = get_optional_supabase_client()
    store = FileLocalStore(settings.LOCAL_STORE_DIR)
    set_services(build_services(client, store, settings))

    logger.info(
        "Storefront Service started",
        backend_configured=client is not None,
        local_store=settings.LOCAL_STORE_DIR,
    )

    yield

    logger.info("Shutting down Storefront Service")
    set_services(None)
    logger.info("Storefront Service stopped")


app = FastAPI(
    title="Storefront Service",
    description="Music store catalog, cart, checkout and back office API",
    version=settings.SERVICE_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
        "X-Guest-Session",
    ],
    max_age=600,
)

app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

setup_exception_handlers(app)

app.include_router(health_router.router)
app.include_router(catalog_router.router)
app.include_router(cart_router.router)
app.include_router(checkout_router.router)
app.include_router(orders_router.router)
app.include_router(wishlist_router.router)
app.include_router(profile_router.router)
app.include_router(admin_router.router)


if __name__ == "__main__":
    uvicorn.run(
        "storefront.app:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
