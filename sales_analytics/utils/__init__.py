"""
Shared utilities for the analytics pipeline.

Keep helpers here small and dependency-free so DAG parsing stays reliable.
"""

from .s3_paths import (
    build_cleansed_s3_key,
    build_raw_s3_key,
    build_report_s3_key,
    split_s3_key,
)

__all__ = ["build_raw_s3_key", "build_cleansed_s3_key", "build_report_s3_key", "split_s3_key"]
