"""
Request metrics middleware for the storefront API.

Every request is reported to a tracking function under its route
template (``/api/orders/{order_id}``), so ids in paths do not create one
time series each. Requests that match no route, such as 404s for unknown
paths, are grouped under a single ``unmatched`` label.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Route template of the matched route, or ``unmatched``."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Reports method, route template, status code and duration per request.

    Attributes:
        track_func: Called with ``method``, ``endpoint``, ``status_code``
            and ``duration`` keyword arguments once the response is ready
    """

    def __init__(self, app, track_func: Callable):
        super().__init__(app)
        self.track_func = track_func

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)

        self.track_func(
            method=request.method,
            endpoint=endpoint_label(request),
            status_code=response.status_code,
            duration=time.perf_counter() - start_time,
        )
        return response
