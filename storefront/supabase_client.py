"""
Supabase client configuration for the storefront service.

Provides a lazily-created Supabase client shared by all repositories.
"""

from typing import Optional

import structlog
from supabase import Client, create_client

from .config import settings

logger = structlog.get_logger(__name__)


class SupabaseConfig:
    """
    Supabase configuration class.

    Loads Supabase URL and keys from settings.
    """

    def __init__(self) -> None:
        """Initialize Supabase configuration from settings."""
        self.url: str = settings.SUPABASE_URL
        self.key: str = settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_ANON_KEY

        if not self.is_configured:
            logger.warning(
                "Supabase credentials not configured; remote calls will fall back",
                url_set=bool(self.url),
                key_set=bool(self.key),
            )

    @property
    def is_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return bool(self.url and self.key)


# Global configuration instance
config = SupabaseConfig()

# Global Supabase client instance
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get or create Supabase client instance.

    Returns:
        Configured Supabase client

    Raises:
        ValueError: If Supabase is not properly configured
    """
    global _supabase_client

    if not config.is_configured:
        raise ValueError("Supabase not configured. Set SUPABASE_URL and SUPABASE_SERVICE_KEY")

    if _supabase_client is None:
        logger.info("Initializing Supabase client")
        _supabase_client = create_client(config.url, config.key)
        logger.info("Supabase client initialized")

    return _supabase_client


def get_optional_supabase_client() -> Optional[Client]:
    """
    Return the shared client, or None when Supabase is not configured.

    Repositories accept None and report every call as a backend failure,
    which routes the service onto its local fallbacks.
    """
    if not config.is_configured:
        return None
    return get_supabase_client()
