"""
Customer-value reports: top spenders, demographic segments, loyalty split,
RFM and per-customer sale ranking.
"""

import numpy as np
import pandas as pd

AGE_BANDS = ["Under 18", "18-25", "26-35", "36-45", "46-60", "60+"]


def top_customers(df: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """
    Customers with the highest summed ``total_sale``.

    Equal totals are ordered by ``customer_id`` ascending.
    """
    totals = (
        df.groupby("customer_id", as_index=False)["total_sale"]
        .sum()
        .rename(columns={"total_sale": "total_sales"})
    )
    return (
        totals.sort_values(["total_sales", "customer_id"], ascending=[False, True], kind="mergesort")
        .head(n)
        .reset_index(drop=True)
    )


def age_band(age: pd.Series) -> pd.Series:
    """Bucket ages into the fixed reporting bands (60 belongs to 46-60)."""
    conditions = [
        age < 18,
        age.between(18, 25),
        age.between(26, 35),
        age.between(36, 45),
        age.between(46, 60),
        age > 60,
    ]
    bands = np.select(conditions, AGE_BANDS, default="")
    return pd.Series(
        pd.Categorical(bands, categories=AGE_BANDS, ordered=True),
        index=age.index,
        name="age_band",
    )


def age_gender_segments(df: pd.DataFrame) -> pd.DataFrame:
    """
    Customers, average sale and transactions per (age band, gender).

    A missing gender is its own segment.
    """
    segmented = df.assign(age_band=age_band(df["age"]))
    result = (
        segmented.groupby(["age_band", "gender"], observed=True, dropna=False)
        .agg(
            customers=("customer_id", "nunique"),
            avg_sale=("total_sale", "mean"),
            transactions=("transaction_id", "count"),
        )
        .reset_index()
    )
    result["age_band"] = result["age_band"].astype(str)
    return result


def repeat_vs_one_time_customers(df: pd.DataFrame) -> pd.DataFrame:
    """
    Split customers by transaction count (1 vs more) and compare their
    average order value.
    """
    orders = df.groupby("customer_id")["transaction_id"].transform("count")
    labelled = df.assign(customer_type=np.where(orders > 1, "Repeat", "One-time"))
    return (
        labelled.groupby("customer_type")
        .agg(
            customers=("customer_id", "nunique"),
            transactions=("transaction_id", "count"),
            avg_order_value=("total_sale", "mean"),
        )
        .reindex(["One-time", "Repeat"])
        .dropna(subset=["customers"])
        .astype({"customers": "int64", "transactions": "int64"})
        .reset_index()
    )


def rfm(df: pd.DataFrame) -> pd.DataFrame:
    """
    Recency, frequency and monetary value per customer.

    Recency is measured in days from the customer's last purchase to the last
    sale date present in the data, so historical snapshots score the same
    whenever they are run.
    """
    reference_date = df["sale_date"].max()
    result = df.groupby("customer_id").agg(
        last_purchase=("sale_date", "max"),
        frequency=("transaction_id", "count"),
        monetary=("total_sale", "sum"),
    )
    result["recency_days"] = (reference_date - result["last_purchase"]).dt.days
    result = result.reset_index()[
        ["customer_id", "last_purchase", "recency_days", "frequency", "monetary"]
    ]
    return result.sort_values(
        ["monetary", "customer_id"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)


def customer_sale_ranking(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rank every customer's transactions by ``total_sale``, highest first.

    Equal sales share a rank and the next rank skips (1, 1, 3).
    """
    ranked = df[["customer_id", "transaction_id", "sale_date", "total_sale"]].copy()
    ranked["sale_rank"] = (
        ranked.groupby("customer_id")["total_sale"]
        .rank(method="min", ascending=False)
        .astype("int64")
    )
    return ranked.sort_values(
        ["customer_id", "sale_rank", "transaction_id"], kind="mergesort"
    ).reset_index(drop=True)
