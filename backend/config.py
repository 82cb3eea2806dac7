"""
SaaS Pricer Configuration

Environment-based settings for the pricing API, MCP server and CLI.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from engines.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_CUSTOMER_COUNT,
    DEFAULT_MARGIN_THRESHOLDS,
    PROJECTION_HORIZON_MONTHS,
)
from engines.schemas.costs import CurrencyCode, MarginThresholds


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SaaS Pricer"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"
    allowed_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    # Report store
    database_url: str = Field(
        default="sqlite:///./saas_pricer.db",
        description="SQLAlchemy URL of the shared report store",
    )
    report_ttl_days: int = Field(default=30, gt=0)
    share_base_url: str = Field(
        default="http://localhost:5173",
        description="Origin used when composing shareable report links",
    )

    # Calculator defaults
    default_currency: CurrencyCode = DEFAULT_CURRENCY
    default_customer_count: int = Field(default=DEFAULT_CUSTOMER_COUNT, gt=0)
    margin_healthy_threshold: float = DEFAULT_MARGIN_THRESHOLDS.healthy
    margin_acceptable_threshold: float = DEFAULT_MARGIN_THRESHOLDS.acceptable
    monthly_growth_horizon_months: int = Field(default=PROJECTION_HORIZON_MONTHS, gt=0)

    # AI cost estimation
    usd_to_myr_rate: float = Field(default=4.47, gt=0)

    @computed_field
    @property
    def margin_thresholds(self) -> MarginThresholds:
        """Margin health bands handed to the engines."""
        return MarginThresholds(
            healthy=self.margin_healthy_threshold,
            acceptable=self.margin_acceptable_threshold,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
