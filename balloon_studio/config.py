"""Configuration management for the balloon studio service."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis Configuration
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis URL")

    # API Configuration
    api_port: int = Field(default=8000, description="API server port")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_workers: int = Field(default=4, description="Number of API workers")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")

    # Inventory Settings
    default_stock_threshold: int = Field(
        default=20, ge=0, description="Low stock threshold for new stock records"
    )
    transaction_retries: int = Field(
        default=5, ge=1, description="Optimistic transaction attempts before giving up"
    )

    # Balloon Accounting
    small_balloons_per_cluster: int = Field(
        default=11, ge=0, description="11inch balloons in one cluster"
    )
    large_balloons_per_cluster: int = Field(
        default=2, ge=0, description="16inch balloons in one cluster"
    )

    # Pricing (integer cents)
    price_small_cents: int = Field(default=50, ge=0, description="Unit price of an 11inch balloon")
    price_large_cents: int = Field(default=75, ge=0, description="Unit price of a 16inch balloon")

    # Simplified ordering
    balloon_order_max_quantity: int = Field(
        default=100, ge=1, description="Max balloons in a simplified order"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
