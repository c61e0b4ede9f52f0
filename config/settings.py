"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    The Supabase URL and key are required for any store access but are
    optional at load time so the seeding script can run its own
    pre-flight check (and a dry run needs neither).
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: Optional[str] = Field(
        None,
        description="Supabase project URL (store endpoint)"
    )
    supabase_key: Optional[str] = Field(
        None,
        description="Supabase anon/public key"
    )
    supabase_service_key: Optional[str] = Field(
        None,
        description="Supabase service role key (for admin operations)"
    )
    supabase_storage_bucket: str = Field(
        default="product-images",
        description="Storage bucket holding product images"
    )
    auth_redirect_url: Optional[str] = Field(
        None,
        description="Where password-reset emails send the user back to"
    )

    # ===================
    # TABLES
    # ===================
    products_table: str = Field(
        default="products",
        description="Table holding product documents"
    )
    users_table: str = Field(
        default="users",
        description="Table holding user profile documents"
    )
    stock_movements_table: str = Field(
        default="stock_movements",
        description="Audit table for stock adjustments"
    )
    orders_table: str = Field(
        default="orders",
        description="Table holding placed orders"
    )
    carts_table: str = Field(
        default="carts",
        description="Table holding signed-in users' carts, keyed by user_id"
    )

    # ===================
    # SEEDING
    # ===================
    seed_batch_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Maximum write operations per committed batch"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def store_configured(self) -> bool:
        """Check if both required store values are present."""
        return bool(self.supabase_url and self.supabase_key)

    @property
    def missing_store_fields(self) -> list[str]:
        """Names of the required store variables that are not set."""
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_key:
            missing.append("SUPABASE_KEY")
        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are present but invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
