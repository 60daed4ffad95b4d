"""
Configuration module for the storefront service.

All configuration values can be overridden via environment variables or .env file.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Storefront service configuration.

    All settings can be overridden via environment variables.

    Attributes:
        SUPABASE_URL: Base URL of the Supabase project
        SUPABASE_SERVICE_KEY: Service role key used for table and RPC access
        SUPABASE_JWT_SECRET: Secret the auth provider signs bearer tokens with
        LOCAL_STORE_DIR: Directory holding guest carts, wishlists and mock orders
        FREE_DELIVERY_THRESHOLD: Subtotal (LKR) from which delivery is free
        DELIVERY_FEE: Delivery fee (LKR) charged below the threshold
        DEFAULT_ITEM_PRICE: Price used for cart lines whose product is unknown
    """

    # Service configuration
    SERVICE_NAME: str = Field(default="storefront-service")
    SERVICE_VERSION: str = Field(default="1.0.0")
    SERVICE_HOST: str = Field(default="0.0.0.0")
    SERVICE_PORT: int = Field(default=8020, ge=1, le=65535)
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    LOG_JSON: bool = Field(default=False)

    # Supabase configuration
    SUPABASE_URL: str = Field(default="")
    SUPABASE_SERVICE_KEY: str = Field(default="")
    SUPABASE_ANON_KEY: str = Field(default="")

    # Bearer token verification
    SUPABASE_JWT_SECRET: str = Field(
        default="your-super-secret-jwt-token-with-at-least-32-characters"
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    JWT_AUDIENCE: str = Field(default="authenticated")

    # Local document store (guest carts, wishlists, mock orders)
    LOCAL_STORE_DIR: str = Field(default=".storefront_data")

    # Pricing and orders
    ORDER_NUMBER_PREFIX: str = Field(default="MUS", min_length=1, max_length=8)
    FREE_DELIVERY_THRESHOLD: float = Field(default=15000, ge=0)
    DELIVERY_FEE: float = Field(default=1500, ge=0)
    DEFAULT_ITEM_PRICE: float = Field(default=15000, ge=0)
    RECENT_ORDER_DAYS: int = Field(default=30, ge=1)

    # Catalog
    CATALOG_CACHE_TTL: int = Field(default=300, ge=0)
    FEATURED_PRODUCTS_LIMIT: int = Field(default=8, ge=1)
    RECOMMENDED_PRODUCTS_LIMIT: int = Field(default=4, ge=1)

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:5173,http://localhost:3000")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("SUPABASE_URL")
    @classmethod
    def validate_supabase_url(cls, value: str) -> str:
        """Strip the trailing slash; an empty URL means Supabase is disabled."""
        if not value:
            return value

        value = value.rstrip("/")
        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(
                f"SUPABASE_URL must start with http:// or https://, got: {value}"
            )
        return value

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
