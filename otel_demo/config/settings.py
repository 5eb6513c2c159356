"""Application settings using Pydantic for environment-based configuration."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings shared by the shop, orders and items services."""

    # Application Configuration
    app_name: str = Field(
        default="tap-otel-demo",
        description="Application name, attached to every span and metric",
    )
    app_title: str = Field(
        default="OpenTelemetry Demo Shop", description="Title of the shop index page"
    )
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")

    # Remote services (used by the shop)
    services_orders: str = Field(
        default="http://localhost:8081", description="Base URL of the orders service"
    )
    services_items: str = Field(
        default="http://localhost:8082", description="Base URL of the items service"
    )
    http_connect_timeout: float = Field(
        default=30.0, gt=0, description="Connect timeout for outbound calls (seconds)"
    )

    # Lookup services
    lookup_max_delay_ms: int = Field(
        default=1000, ge=0, description="Upper bound (exclusive) of the injected lookup delay"
    )

    # Telemetry
    telemetry_enabled: bool = Field(default=True, description="Export traces and metrics")
    otlp_endpoint: str = Field(
        default="http://localhost:4317", description="OTLP gRPC endpoint of the collector sidecar"
    )
    trace_sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Fraction of root traces to sample"
    )
    metrics_export_interval_ms: int = Field(
        default=10000, gt=0, description="How often metrics are pushed to the collector"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("services_orders", "services_items")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Service URL must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
