"""
Time-based reports over ``sale_date`` and ``sale_time``.
"""

import numpy as np
import pandas as pd


def sale_hour(df: pd.DataFrame) -> pd.Series:
    """Hour of day (0-23) parsed from the ``HH:MM:SS`` sale time."""
    return pd.to_datetime(df["sale_time"], format="%H:%M:%S").dt.hour


def day_of_week(df: pd.DataFrame) -> pd.Series:
    """Day of week numbered 0=Sunday through 6=Saturday."""
    # pandas numbers Monday=0 .. Sunday=6
    return (df["sale_date"].dt.dayofweek + 1) % 7


def monthly_sales_trend(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sales per calendar month 1-12.

    The year is ignored: January of every year in the data lands in month 1.
    """
    return (
        df.assign(month=df["sale_date"].dt.month)
        .groupby("month")
        .agg(
            total_sales=("total_sale", "sum"),
            transactions=("transaction_id", "count"),
            avg_sale=("total_sale", "mean"),
        )
        .reset_index()
    )


def best_month_by_year(df: pd.DataFrame) -> pd.DataFrame:
    """Highest average sale month of each year (ties all reported)."""
    monthly = (
        df.assign(year=df["sale_date"].dt.year, month=df["sale_date"].dt.month)
        .groupby(["year", "month"], as_index=False)
        .agg(avg_sale=("total_sale", "mean"))
    )
    monthly["month_rank"] = (
        monthly.groupby("year")["avg_sale"].rank(method="min", ascending=False).astype("int64")
    )
    return (
        monthly[monthly["month_rank"] == 1]
        .drop(columns="month_rank")
        .sort_values(["year", "month"])
        .reset_index(drop=True)
    )


def hourly_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Transactions and sales per hour of day."""
    return (
        df.assign(hour=sale_hour(df))
        .groupby("hour")
        .agg(
            transactions=("transaction_id", "count"),
            total_sales=("total_sale", "sum"),
        )
        .reset_index()
    )


def day_part_sales(df: pd.DataFrame, morning_cutoff_hour: int = 16) -> pd.DataFrame:
    """
    Morning vs Evening volume.

    Hours before ``morning_cutoff_hour`` count as Morning, everything from the
    cutoff on as Evening.
    """
    day_part = np.where(sale_hour(df) < morning_cutoff_hour, "Morning", "Evening")
    return (
        df.assign(day_part=day_part)
        .groupby("day_part")
        .agg(
            transactions=("transaction_id", "count"),
            total_sales=("total_sale", "sum"),
        )
        .reindex(["Morning", "Evening"])
        .dropna(subset=["transactions"])
        .astype({"transactions": "int64"})
        .reset_index()
    )


def weekday_vs_weekend(df: pd.DataFrame) -> pd.DataFrame:
    """Sales split between weekdays and weekends (Saturday, Sunday)."""
    day_type = np.where(day_of_week(df).isin([0, 6]), "Weekend", "Weekday")
    return (
        df.assign(day_type=day_type)
        .groupby("day_type")
        .agg(
            transactions=("transaction_id", "count"),
            total_sales=("total_sale", "sum"),
            avg_sale=("total_sale", "mean"),
        )
        .reindex(["Weekday", "Weekend"])
        .dropna(subset=["transactions"])
        .astype({"transactions": "int64"})
        .reset_index()
    )


def rolling_category_sales(df: pd.DataFrame, window: int = 3) -> pd.DataFrame:
    """
    Monthly sales per category with a trailing moving average.

    Months are year-month buckets; the average covers the current bucket and
    up to ``window - 1`` preceding buckets of the same category. Months with
    no sales are not filled in.
    """
    monthly = (
        df.assign(month=df["sale_date"].dt.to_period("M"))
        .groupby(["category", "month"], as_index=False)
        .agg(monthly_sales=("total_sale", "sum"))
        .sort_values(["category", "month"])
        .reset_index(drop=True)
    )
    monthly["rolling_avg"] = monthly.groupby("category")["monthly_sales"].transform(
        lambda s: s.rolling(window, min_periods=1).mean()
    )
    monthly["month"] = monthly["month"].astype(str)
    return monthly
