"""
Exploration queries over the cleaned ``retail_sales`` snapshot.

Summary counts plus a few ledger lookups. All functions are read-only.
"""

import datetime as dt
from typing import Union

import pandas as pd

from sales_analytics.logger import setup_logger

logger = setup_logger("etl.explore")


def count_records(df: pd.DataFrame) -> int:
    return int(len(df))


def count_customers(df: pd.DataFrame) -> int:
    return int(df["customer_id"].nunique())


def count_categories(df: pd.DataFrame) -> int:
    return int(df["category"].nunique())


def summarize_retail_sales(df: pd.DataFrame) -> dict[str, int]:
    """Record, distinct customer and distinct category counts."""
    summary = {
        "total_records": count_records(df),
        "total_customers": count_customers(df),
        "total_categories": count_categories(df),
    }
    logger.info(
        f"Exploration: {summary['total_records']} records, "
        f"{summary['total_customers']} customers, "
        f"{summary['total_categories']} categories"
    )
    return summary


def sales_on_date(df: pd.DataFrame, day: Union[str, dt.date]) -> pd.DataFrame:
    """All transactions made on one calendar date, ordered by sale time."""
    target = pd.Timestamp(day).normalize()
    rows = df[df["sale_date"].dt.normalize() == target]
    return rows.sort_values(["sale_time", "transaction_id"]).reset_index(drop=True)


def bulk_category_purchases(
    df: pd.DataFrame,
    category: str,
    year: int,
    month: int,
    min_quantity: int = 4,
) -> pd.DataFrame:
    """
    Transactions of ``category`` in one calendar month with at least
    ``min_quantity`` units.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    mask = (
        (df["category"] == category)
        & (df["sale_date"].dt.year == year)
        & (df["sale_date"].dt.month == month)
        & (df["quantity"] >= min_quantity)
    )
    return df[mask].sort_values("transaction_id").reset_index(drop=True)


def average_customer_age(df: pd.DataFrame, category: str) -> float:
    """Mean age of buyers in a category, rounded to 2 decimals; NaN if absent."""
    ages = df.loc[df["category"] == category, "age"]
    if ages.empty:
        return float("nan")
    return round(float(ages.mean()), 2)
