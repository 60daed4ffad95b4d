"""
Prometheus metrics for the storefront service.

Tracks HTTP traffic, cart and order operations, fallbacks to local storage
and latency of calls to the hosted backend.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "storefront_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "storefront_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0)
)

# Cart metrics
cart_operations_total = Counter(
    "storefront_cart_operations_total",
    "Total cart operations",
    ["operation", "status"]
)

cart_merges_total = Counter(
    "storefront_cart_merges_total",
    "Guest cart merges on login",
    ["outcome"]
)

# Order metrics
orders_created_total = Counter(
    "storefront_orders_created_total",
    "Orders created at checkout",
    ["source"]
)

order_status_updates_total = Counter(
    "storefront_order_status_updates_total",
    "Order status updates by staff",
    ["status"]
)

# Fallback and backend metrics
fallbacks_total = Counter(
    "storefront_fallbacks_total",
    "Operations served from local storage or sample data after a backend failure",
    ["operation"]
)

backend_calls_total = Counter(
    "storefront_backend_calls_total",
    "Total calls to the hosted backend",
    ["operation", "status"]
)

backend_call_duration_seconds = Histogram(
    "storefront_backend_call_duration_seconds",
    "Hosted backend call duration in seconds",
    ["operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)


def track_request_metrics(method: str, endpoint: str, status_code: int, duration: float):
    """Track HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def track_cart_operation(operation: str, success: bool):
    """Track cart operations."""
    status = "success" if success else "failure"
    cart_operations_total.labels(operation=operation, status=status).inc()


def track_cart_merge(merged: bool):
    """Track guest cart merges; ``merged=False`` means the local fallback ran."""
    cart_merges_total.labels(outcome="merged" if merged else "local_fallback").inc()


def track_order_created(is_mock: bool):
    """Track orders created, split by remote and mock store."""
    orders_created_total.labels(source="mock" if is_mock else "remote").inc()


def track_order_status_update(status: str):
    """Track order status updates."""
    order_status_updates_total.labels(status=status).inc()


def track_fallback(operation: str):
    """Track an operation that was served by a fallback."""
    fallbacks_total.labels(operation=operation).inc()


def track_backend_call(operation: str, success: bool, duration: float):
    """Track hosted backend call metrics."""
    status = "success" if success else "failure"
    backend_calls_total.labels(operation=operation, status=status).inc()
    backend_call_duration_seconds.labels(operation=operation).observe(duration)


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
