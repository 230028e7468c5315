import numpy as np
import pandas as pd

from sales_analytics.logger import setup_logger

logger = setup_logger("etl.clean")

# Every report aggregates at least one of these
REQUIRED_MEASURES = ["quantity", "price_per_unit", "cogs", "total_sale"]

INTEGER_COLUMNS = ["transaction_id", "customer_id", "age", "quantity"]


class AgeImputationError(ValueError):
    """A category needs imputed ages but has no recorded age to average."""

    def __init__(self, categories):
        self.categories = list(categories)
        super().__init__(
            "Cannot impute age for categories without any recorded age: "
            + ", ".join(str(c) for c in self.categories)
        )


def round_half_away_from_zero(values: pd.Series) -> pd.Series:
    """Round to the nearest integer; .5 moves away from zero (20.5 -> 21)."""
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def drop_incomplete_rows(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Remove records missing any measure the reports depend on.

    Returns the complete rows and the number removed.
    """
    complete = df[REQUIRED_MEASURES].notna().all(axis=1)
    dropped = int((~complete).sum())
    if dropped > 0:
        logger.warning(f"Removed {dropped} rows with missing {', '.join(REQUIRED_MEASURES)}")
    return df.loc[complete].copy(), dropped


def category_mean_ages(df: pd.DataFrame) -> pd.Series:
    """Rounded mean of the recorded ages of each category."""
    known = df[df["age"].notna()]
    means = known.groupby("category")["age"].mean().astype("float64")
    return round_half_away_from_zero(means)


def impute_missing_ages(df: pd.DataFrame) -> pd.DataFrame:
    """
    Fill null ages with the rounded mean age of the record's category.

    Raises:
        AgeImputationError: a category with null ages has no recorded age.
    """
    df = df.copy()
    missing = df["age"].isna()
    if not missing.any():
        return df

    means = category_mean_ages(df)
    needed = df.loc[missing, "category"].unique()
    unimputable = sorted(set(needed) - set(means.index))
    if unimputable:
        logger.error(f"Age imputation impossible for categories: {unimputable}")
        raise AgeImputationError(unimputable)

    df.loc[missing, "age"] = df.loc[missing, "category"].map(means).astype("int64").to_numpy()
    logger.info(f"Imputed age for {int(missing.sum())} rows across {len(needed)} categories")
    return df


def clean_retail_sales(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Produce the cleaned snapshot every report reads.

    Incomplete rows are removed first, then missing ages are imputed per
    category. The input frame is left untouched; running this on an already
    cleaned frame returns an equal frame.
    """
    logger.info(f"Starting cleaning on {len(df)} rows")

    clean_df, dropped = drop_incomplete_rows(df)
    clean_df = impute_missing_ages(clean_df)

    for col in INTEGER_COLUMNS:
        clean_df[col] = clean_df[col].astype("int64")
    for col in ["price_per_unit", "cogs", "total_sale"]:
        clean_df[col] = clean_df[col].astype("float64")

    clean_df = clean_df.reset_index(drop=True)
    logger.info(f"Cleaning completed: {len(clean_df)} rows ({dropped} removed)")
    return clean_df, dropped
