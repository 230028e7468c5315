"""
Outlier and anomaly reports.
"""

import pandas as pd


def percentile_threshold(values: pd.Series, q: float = 0.95) -> float:
    """
    Percentile of a column using linear interpolation between closest ranks
    (numpy's default ``linear`` method).
    """
    if not 0 <= q <= 1:
        raise ValueError(f"q must be in [0, 1], got {q}")
    return float(values.quantile(q, interpolation="linear"))


def percentile_outliers(df: pd.DataFrame, q: float = 0.95) -> pd.DataFrame:
    """
    Transactions whose ``quantity`` or ``price_per_unit`` exceeds the ``q``
    percentile of that column across the whole snapshot.
    """
    quantity_limit = percentile_threshold(df["quantity"], q)
    price_limit = percentile_threshold(df["price_per_unit"], q)

    result = df[["transaction_id", "customer_id", "category", "quantity", "price_per_unit"]].copy()
    result["quantity_outlier"] = result["quantity"] > quantity_limit
    result["price_outlier"] = result["price_per_unit"] > price_limit

    flagged = result[result["quantity_outlier"] | result["price_outlier"]]
    return flagged.sort_values("transaction_id").reset_index(drop=True)


def age_outlier_audit(df: pd.DataFrame, min_age: int = 18, max_age: int = 90) -> pd.DataFrame:
    """Per category, count and mean age of records below ``min_age`` or above ``max_age``."""
    suspicious = df[(df["age"] < min_age) | (df["age"] > max_age)]
    return (
        suspicious.groupby("category", as_index=False)
        .agg(records=("transaction_id", "count"), avg_age=("age", "mean"))
        .sort_values("category")
        .reset_index(drop=True)
    )


def high_value_transactions(df: pd.DataFrame, threshold: float = 1000.0) -> pd.DataFrame:
    """Transactions with ``total_sale`` strictly above ``threshold``."""
    rows = df[df["total_sale"] > threshold]
    return rows.sort_values(
        ["total_sale", "transaction_id"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)
