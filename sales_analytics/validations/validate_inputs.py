import pandas as pd
from pandera.errors import SchemaErrors

from .input_schemas import retail_sales_raw_schema
from sales_analytics.logger import setup_logger

logger = setup_logger("validation.input")


def drop_failed_rows(df: pd.DataFrame, err: SchemaErrors) -> pd.DataFrame:
    """Drop the rows referenced by a lazy validation's failure cases."""
    failed = err.failure_cases
    if len(failed) == 0:
        return df.copy()

    failed_indices = failed["index"].dropna().unique()
    if len(failed_indices) == 0:
        # Column-level failures (dtype, missing column) carry no row index
        return df.copy()
    return df.drop(index=failed_indices)


def validate_retail_sales(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Validate the raw ledger; rows failing identifier or type checks are dropped.

    Returns the surviving rows and the number of rows removed.
    """
    logger.info(f"Starting retail_sales validation on {len(df)} rows")
    try:
        validated_df = retail_sales_raw_schema.validate(df, lazy=True)
        logger.info("retail_sales validation passed")
        return validated_df, 0

    except SchemaErrors as err:
        failed = err.failure_cases
        logger.warning(f"retail_sales validation failed: {len(failed)} issues")
        logger.warning(f"Errors summary:\n{failed.groupby(['column', 'check']).size()}")

        clean_df = drop_failed_rows(df, err)
        dropped = len(df) - len(clean_df)

        if clean_df.empty:
            raise ValueError("All rows failed retail_sales validation")

        # Re-validate; anything still failing is structural, not row-level
        clean_df = retail_sales_raw_schema.validate(clean_df)
        logger.info(f"Cleaned retail_sales: {len(clean_df)} rows remaining ({dropped} dropped)")

        return clean_df, dropped
