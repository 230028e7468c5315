"""
Gross margin per transaction and its High/Low classification.
"""

import numpy as np
import pandas as pd

HIGH_MARGIN = "High Margin"
LOW_MARGIN = "Low Margin"


def gross_margin_pct(total_sale: pd.Series, cogs: pd.Series) -> pd.Series:
    """
    ``(total_sale - cogs) / total_sale * 100``.

    Zero-revenue rows yield NaN instead of raising or producing infinity.
    """
    revenue = total_sale.astype("float64").where(total_sale != 0)
    return (revenue - cogs) / revenue * 100


def transaction_margins(df: pd.DataFrame) -> pd.DataFrame:
    result = df[["transaction_id", "customer_id", "category", "total_sale", "cogs"]].copy()
    result["gross_margin_pct"] = gross_margin_pct(result["total_sale"], result["cogs"])
    return result.sort_values("transaction_id").reset_index(drop=True)


def margin_classification(df: pd.DataFrame, threshold: float = 40.0) -> pd.DataFrame:
    """
    Count transactions above and at-or-below a margin threshold.

    Margins strictly greater than ``threshold`` percent are High; everything
    else, including undefined (zero-revenue) margins, is Low.
    """
    margins = gross_margin_pct(df["total_sale"], df["cogs"])
    bucket = np.where(margins > threshold, HIGH_MARGIN, LOW_MARGIN)
    counts = pd.Series(bucket, index=df.index).value_counts()
    return (
        counts.reindex([HIGH_MARGIN, LOW_MARGIN], fill_value=0)
        .rename_axis("margin_category")
        .reset_index(name="transactions")
    )
