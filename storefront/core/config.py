"""Application configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Supabase credentials are only required when the Supabase storage
    backend is selected.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="storefront-backend", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Storage
    storage_backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="Persistence backend for carts, orders, inventory and counters",
    )

    # Supabase
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_secret_key: str = Field(default="", description="Supabase secret key for backend operations")
    supabase_schema: str = Field(default="public", description="Postgres schema holding the storefront tables")
    supabase_timeout_seconds: int = Field(default=10, ge=1, description="PostgREST request timeout")

    # Auth
    jwt_secret: str = Field(..., description="Secret used to verify bearer tokens")
    jwt_algorithm: str = Field(default="HS256", description="Bearer token signing algorithm")

    # Cart and checkout
    cart_max_line_quantity: int = Field(default=8, ge=1, description="Maximum quantity of a single cart line")
    order_counter_name: str = Field(default="orderNumber", description="Counter row used for order numbers")
    order_number_width: int = Field(default=6, ge=1, description="Zero-padded width of formatted order numbers")
    checkout_restock_on_failure: bool = Field(
        default=True,
        description="Restock already-decremented lines when an order commit fails part way",
    )

    @model_validator(mode="after")
    def require_supabase_credentials(self) -> "Settings":
        """Fail fast when the Supabase backend is selected without credentials."""
        if self.storage_backend == "supabase" and not (self.supabase_url and self.supabase_secret_key):
            raise ValueError("SUPABASE_URL and SUPABASE_SECRET_KEY are required for the supabase storage backend")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
