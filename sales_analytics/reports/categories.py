"""
Category performance reports.
"""

import pandas as pd


def _by_total_desc(df: pd.DataFrame, column: str) -> pd.DataFrame:
    return df.sort_values(
        [column, "category"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)


def category_rankings(df: pd.DataFrame) -> pd.DataFrame:
    """Total sales, average unit price and units sold per category."""
    result = df.groupby("category", as_index=False).agg(
        total_sales=("total_sale", "sum"),
        avg_price=("price_per_unit", "mean"),
        total_quantity=("quantity", "sum"),
        transactions=("transaction_id", "count"),
    )
    return _by_total_desc(result, "total_sales")


def category_profitability(df: pd.DataFrame) -> pd.DataFrame:
    """Gross profit (``total_sale - cogs``) summed and averaged per category."""
    result = (
        df.assign(gross_profit=df["total_sale"] - df["cogs"])
        .groupby("category", as_index=False)
        .agg(
            total_profit=("gross_profit", "sum"),
            avg_profit=("gross_profit", "mean"),
        )
    )
    return _by_total_desc(result, "total_profit")


def basket_size(df: pd.DataFrame) -> pd.DataFrame:
    """Average units per transaction in each category."""
    result = df.groupby("category", as_index=False).agg(avg_quantity=("quantity", "mean"))
    return _by_total_desc(result, "avg_quantity")


def transactions_by_gender_category(df: pd.DataFrame) -> pd.DataFrame:
    """Transaction count for every (category, gender) pair, null gender included."""
    return (
        df.groupby(["category", "gender"], as_index=False, dropna=False)
        .agg(transactions=("transaction_id", "count"))
        .sort_values(["category", "gender"])
        .reset_index(drop=True)
    )


def unique_customers_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Distinct customers who bought from each category."""
    result = df.groupby("category", as_index=False).agg(unique_customers=("customer_id", "nunique"))
    return _by_total_desc(result, "unique_customers")
