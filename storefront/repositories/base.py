"""
Shared plumbing for Supabase-backed repositories.

Every remote call goes through ``SupabaseRepository._execute`` so that
failures surface uniformly as ``BackendUnavailableException`` and are
counted in the backend metrics.
"""

import time
from typing import Any, Callable, Dict, Optional

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import Client

from ..exceptions import BackendRejectedException, BackendUnavailableException
from ..metrics import track_backend_call

logger = structlog.get_logger(__name__)


class SupabaseRepository:
    """
    Base class for repositories that talk to Supabase.

    Attributes:
        client: Supabase client, or None when the backend is not configured
    """

    def __init__(self, client: Optional[Client]):
        """
        Initialize repository.

        Args:
            client: Supabase client; None makes every call fail fast
        """
        self.client = client

    def _execute(self, operation: str, build: Callable[[Client], Any]) -> Any:
        """
        Build and execute a PostgREST request.

        Args:
            operation: Operation name used in logs, metrics and errors
            build: Callable receiving the client and returning an executable request

        Returns:
            The ``data`` payload of the response

        Raises:
            BackendUnavailableException: If the client is missing or the call fails
        """
        if self.client is None:
            raise BackendUnavailableException(operation, "Supabase not configured")

        start_time = time.time()
        try:
            response = build(self.client).execute()
        except APIError as e:
            track_backend_call(operation, False, time.time() - start_time)
            logger.warning("Backend call rejected", operation=operation, error=e.message)
            raise BackendUnavailableException(operation, e.message) from e
        except httpx.HTTPError as e:
            track_backend_call(operation, False, time.time() - start_time)
            logger.warning("Backend unreachable", operation=operation, error=str(e))
            raise BackendUnavailableException(operation, str(e)) from e

        track_backend_call(operation, True, time.time() - start_time)
        return response.data

    def _rpc(self, function: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Call a stored function.

        Functions that answer with a ``{"success": ..., "error": ...}``
        envelope are unwrapped: a false ``success`` raises.

        Raises:
            BackendUnavailableException: If the call fails
            BackendRejectedException: If the function reports ``success: false``
        """
        data = self._execute(function, lambda client: client.rpc(function, params or {}))

        if isinstance(data, dict) and data.get("success") is False:
            reason = data.get("error") or data.get("message")
            logger.info("Backend function reported failure", function=function, reason=reason)
            raise BackendRejectedException(function, reason)

        return data
