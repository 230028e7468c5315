"""
S3 path helpers.

Raw ledger, cleansed snapshot and report keys are all built here so the DAG and
the loaders agree on where each file lives.
"""

from typing import Tuple


def _ensure_trailing_slash(prefix: str) -> str:
    if not prefix:
        return ""
    return prefix if prefix.endswith("/") else f"{prefix}/"


def _strip_leading_slash(path: str) -> str:
    return path.lstrip("/") if path else ""


def build_raw_s3_key(raw_folder: str, relative_key: str) -> str:
    """
    Build a full S3 key for the raw sales ledger.

    Example:
        build_raw_s3_key("retail-data", "retail_sales.csv")
        -> "retail-data/retail_sales.csv"
    """

    return f"{_ensure_trailing_slash(raw_folder)}{_strip_leading_slash(relative_key)}"


def build_cleansed_s3_key(cleansed_folder: str, relative_key: str) -> str:
    """
    Build a full S3 key for the cleaned snapshot.

    Example:
        build_cleansed_s3_key("cleansed-data/", "retail_sales_clean.csv")
        -> "cleansed-data/retail_sales_clean.csv"
    """

    return f"{_ensure_trailing_slash(cleansed_folder)}{_strip_leading_slash(relative_key)}"


def build_report_s3_key(reports_folder: str, report_name: str, run_date: str = "") -> str:
    """
    Build the S3 key of one report result, optionally partitioned by run date.

    Example:
        build_report_s3_key("reports/", "top_customers", "2026-01-01")
        -> "reports/2026-01-01/top_customers.csv"
    """
    if not report_name:
        raise ValueError("report_name must not be empty")
    folder = _ensure_trailing_slash(reports_folder)
    if run_date:
        folder = f"{folder}{_ensure_trailing_slash(_strip_leading_slash(run_date))}"
    return f"{folder}{report_name}.csv"


def split_s3_key(key: str) -> Tuple[str, str]:
    """Split a key into (prefix, filename); the prefix has no trailing slash."""
    clean_key = _strip_leading_slash(key)
    if "/" in clean_key:
        prefix, filename = clean_key.rsplit("/", 1)
        return prefix, filename
    return "", clean_key
