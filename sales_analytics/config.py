"""
YAML configuration for the analytics pipeline.

The DAG reads connection and storage settings from ``config.yaml`` next to this
module; the ``reports`` section tunes the report catalogue.
"""

from pathlib import Path
from typing import Any, Optional

import yaml

CONFIG_PATH = Path(__file__).parent / "config.yaml"

DEFAULT_REPORT_SETTINGS = {
    "top_n": 10,
    "margin_threshold": 40.0,
    "outlier_percentile": 0.95,
    "morning_cutoff_hour": 16,
    "rolling_window": 3,
    "high_value_threshold": 1000.0,
}


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    """Read the pipeline YAML config; an empty file yields an empty dict."""
    with open(path or CONFIG_PATH) as f:
        return yaml.safe_load(f) or {}


def report_settings(config: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """
    Merge the ``reports`` section of a config over the defaults.

    Unknown keys are rejected so a typo in the YAML does not silently fall back
    to a default threshold.
    """
    overrides = (config or {}).get("reports") or {}
    unknown = sorted(set(overrides) - set(DEFAULT_REPORT_SETTINGS))
    if unknown:
        raise ValueError(f"Unknown report settings: {', '.join(unknown)}")

    settings = dict(DEFAULT_REPORT_SETTINGS)
    settings.update(overrides)

    if not 0 < settings["outlier_percentile"] < 1:
        raise ValueError("outlier_percentile must be between 0 and 1")
    if settings["rolling_window"] < 1:
        raise ValueError("rolling_window must be at least 1")
    return settings
