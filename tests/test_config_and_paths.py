"""
Unit tests for YAML config loading and S3 key helpers.
"""

import pytest

from sales_analytics.config import DEFAULT_REPORT_SETTINGS, load_config, report_settings
from sales_analytics.utils.s3_paths import (
    build_cleansed_s3_key,
    build_raw_s3_key,
    build_report_s3_key,
    split_s3_key,
)


class TestConfig:
    """Test suite for configuration."""

    def test_bundled_config_loads(self):
        config = load_config()
        assert config["s3"]["sales_key"] == "retail_sales.csv"
        assert config["snowflake"]["table_name"] == "RETAIL_SALES"
        assert report_settings(config)["top_n"] == 10

    def test_defaults_without_reports_section(self):
        assert report_settings({}) == DEFAULT_REPORT_SETTINGS

    def test_override(self, test_output_dir):
        path = test_output_dir / "config.yaml"
        path.write_text("reports:\n  top_n: 3\n  margin_threshold: 25\n")
        settings = report_settings(load_config(path))
        assert settings["top_n"] == 3
        assert settings["margin_threshold"] == 25
        assert settings["outlier_percentile"] == 0.95

    def test_empty_file(self, test_output_dir):
        path = test_output_dir / "empty.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_unknown_setting_rejected(self):
        with pytest.raises(ValueError, match="top_m"):
            report_settings({"reports": {"top_m": 5}})

    def test_invalid_percentile_rejected(self):
        with pytest.raises(ValueError):
            report_settings({"reports": {"outlier_percentile": 95}})


class TestS3Paths:
    """Test suite for S3 key helpers."""

    def test_raw_key(self):
        assert build_raw_s3_key("retail-data", "retail_sales.csv") == "retail-data/retail_sales.csv"
        assert build_raw_s3_key("retail-data/", "/retail_sales.csv") == "retail-data/retail_sales.csv"

    def test_cleansed_key(self):
        assert build_cleansed_s3_key("", "clean.csv") == "clean.csv"

    def test_report_key(self):
        assert build_report_s3_key("reports", "rfm") == "reports/rfm.csv"
        assert build_report_s3_key("reports/", "rfm", "2026-01-01") == "reports/2026-01-01/rfm.csv"

    def test_report_key_requires_name(self):
        with pytest.raises(ValueError):
            build_report_s3_key("reports/", "")

    def test_split_key(self):
        assert split_s3_key("cleansed-data/retail_sales_clean.csv") == ("cleansed-data", "retail_sales_clean.csv")
        assert split_s3_key("/file.csv") == ("", "file.csv")
