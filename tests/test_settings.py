"""
Tests for cost report configuration.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cost_report.config import CostReportSettings, get_settings


class TestCostReportSettings:
    """Test suite for CostReportSettings."""

    def test_default_values(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = CostReportSettings()

            assert settings.provider == "real"
            assert settings.profile is None
            assert settings.ce_region == "us-east-1"
            assert settings.anomaly_threshold == 2.0
            assert settings.chart_top_n == 10
            assert settings.currency == "USD"
            assert settings.log_level == "WARNING"

    def test_output_dir_defaults_to_home(self):
        with patch.dict(os.environ, {"HOME": "/home/reporter"}):
            settings = CostReportSettings()

            assert settings.output_dir == Path.home()

    def test_environment_override(self):
        """Test configuration from environment variables."""
        env_vars = {
            "COST_REPORT_PROVIDER": "mock",
            "COST_REPORT_PROFILE": "prod,dev",
            "COST_REPORT_OUTPUT_DIR": "/tmp/reports",
            "COST_REPORT_ANOMALY_THRESHOLD": "3.5",
            "COST_REPORT_CHART_TOP_N": "5",
            "COST_REPORT_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings = CostReportSettings()

            assert settings.provider == "mock"
            assert settings.profile == "prod,dev"
            assert settings.output_dir == Path("/tmp/reports")
            assert settings.anomaly_threshold == 3.5
            assert settings.chart_top_n == 5
            assert settings.log_level == "DEBUG"

    def test_invalid_provider(self):
        with patch.dict(os.environ, {"COST_REPORT_PROVIDER": "localstack"}, clear=True):
            with pytest.raises(ValidationError):
                CostReportSettings()

    def test_threshold_must_be_positive(self):
        with pytest.raises(ValidationError):
            CostReportSettings(anomaly_threshold=0)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
