"""
Report Configuration using pydantic-settings.

Environment-driven settings for the cost report CLI.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CostReportSettings(BaseSettings):
    """Cost report configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COST_REPORT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider Configuration
    provider: Literal["real", "mock"] = Field(default="real", description="Cost data provider (real, mock)")
    profile: Optional[str] = Field(default=None, description="Default AWS profile(s), comma-separated")
    ce_region: str = Field(default="us-east-1", description="Cost Explorer API region")

    # Report Configuration
    output_dir: Path = Field(default_factory=Path.home, description="Directory for generated reports")
    anomaly_threshold: float = Field(default=2.0, gt=0, description="Anomaly stddev multiplier")
    chart_top_n: int = Field(default=10, ge=1, description="Services shown in the stacked chart")
    currency: str = Field(default="USD", description="Currency label")

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")


@lru_cache
def get_settings() -> CostReportSettings:
    """Get cached settings instance."""
    return CostReportSettings()
