import pandas as pd
from pandera.errors import SchemaErrors

from .output_schemas import retail_sales_clean_schema
from sales_analytics.logger import setup_logger

logger = setup_logger("validation.output")


def validate_retail_sales_clean(df: pd.DataFrame) -> pd.DataFrame:
    """
    Validate the cleaned snapshot before any report reads it.

    Cleaning already guarantees every invariant here, so a failure means a
    cleaning bug (e.g. an age left unimputed). Nothing is dropped: the lazy
    ``SchemaErrors`` is logged and re-raised.
    """
    logger.info(f"Starting output validation on {len(df)} records")

    try:
        validated_df = retail_sales_clean_schema.validate(df, lazy=True)
    except SchemaErrors as err:
        failed = err.failure_cases
        logger.error(
            f"Output validation failed with {len(failed)} issues"
        )
        logger.error(
            f"Failure summary:\n{failed.groupby(['column', 'check']).size()}"
        )
        raise

    logger.info("Output validation passed")
    return validated_df
