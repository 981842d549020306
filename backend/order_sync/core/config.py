"""
Centralized configuration management with Pydantic Settings.
All environment variables are validated and typed.

Gateway credentials, the webhook secret and the operating mode are
required: a missing value fails validation and aborts startup.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "NGenius Order Sync"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Order store
    database_url: str
    database_pool_size: int = 10
    database_max_overflow: int = 5
    database_echo: bool = False

    # N-Genius gateway
    gateway_url: str = Field(alias="NG_GATEWAY_URL")
    outlet_id: str = Field(alias="NG_OUTLET")
    api_key: str = Field(alias="NG_KEY")
    currency: str = Field(default="XOF", alias="NG_CURRENCY")
    gateway_timeout: float = 30.0
    redirect_url: str = Field(
        default="https://a2-expres.com/payment/success.html",
        alias="NG_REDIRECT_URL",
    )
    cancel_url: str = Field(
        default="https://a2-expres.com/payment/cancel.html",
        alias="NG_CANCEL_URL",
    )

    # Webhook
    webhook_secret: str = Field(alias="NG_WEBHOOK_SECRET")
    mode: str = Field(alias="NG_MODE", pattern="^(sandbox|production)$")

    # Apply mapped statuses even to confirmed/cancelled orders
    reconcile_permissive: bool = False

    # CORS - stored as comma-separated string to avoid JSON parsing issues
    allowed_origins_str: str = Field(default="*", alias="ALLOWED_ORIGINS")

    @property
    def allowed_origins(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]

    @property
    def is_sandbox(self) -> bool:
        return self.mode == "sandbox"

    # Observability
    sentry_dsn: Optional[str] = None
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
