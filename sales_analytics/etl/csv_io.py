from io import StringIO
from pathlib import Path
from typing import IO, Union

import pandas as pd

from sales_analytics.logger import setup_logger

logger = setup_logger("etl.csv_io")

# Header spellings used by the source ledger export
COLUMN_ALIASES = {
    "transactions_id": "transaction_id",
    "quantiy": "quantity",
}

RETAIL_SALES_COLUMNS = [
    "transaction_id",
    "sale_date",
    "sale_time",
    "customer_id",
    "gender",
    "age",
    "category",
    "quantity",
    "price_per_unit",
    "cogs",
    "total_sale",
]

INTEGER_COLUMNS = ["transaction_id", "customer_id", "age", "quantity"]
DECIMAL_COLUMNS = ["price_per_unit", "cogs", "total_sale"]
TEXT_COLUMNS = ["gender", "category"]


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase headers, replace spaces with underscores and apply aliases."""
    df = df.copy()
    df.columns = df.columns.str.strip().str.lower().str.replace(" ", "_")
    return df.rename(columns=COLUMN_ALIASES)


def coerce_retail_sales_types(df: pd.DataFrame) -> pd.DataFrame:
    """
    Cast raw ledger columns to their analytic types.

    Unparseable values become nulls so the input schema can count and drop them:
    integers use the nullable ``Int64`` dtype, ``sale_date`` becomes a midnight
    timestamp and ``sale_time`` a zero-padded ``HH:MM:SS`` string.
    """
    missing = [col for col in RETAIL_SALES_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"retail_sales is missing columns: {missing}")

    df = df[RETAIL_SALES_COLUMNS].copy()

    for col in INTEGER_COLUMNS:
        numeric = pd.to_numeric(df[col], errors="coerce")
        # Fractional ids/ages are not valid integers
        numeric = numeric.where(numeric.isna() | (numeric % 1 == 0))
        df[col] = numeric.astype("Int64")

    for col in DECIMAL_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")

    for col in TEXT_COLUMNS:
        df[col] = df[col].astype(object).map(lambda v: v.strip() if isinstance(v, str) else v)

    df["sale_date"] = pd.to_datetime(
        df["sale_date"],
        errors="coerce",
        format="mixed",
    ).dt.normalize()

    sale_time = pd.to_datetime(
        df["sale_time"].astype(str),
        errors="coerce",
        format="mixed",
    )
    df["sale_time"] = sale_time.dt.strftime("%H:%M:%S")

    return df


def read_retail_sales_csv(source: Union[str, Path, IO[str]]) -> pd.DataFrame:
    """
    Bulk load the ``retail_sales`` ledger from a CSV path or text buffer.
    """
    df = pd.read_csv(source)
    logger.info(f"Read {len(df)} raw rows from retail_sales CSV")

    df = normalize_columns(df)
    logger.info(f"Normalized columns: {list(df.columns)}")

    return coerce_retail_sales_types(df)


def parse_retail_sales_csv(content: str) -> pd.DataFrame:
    """Parse CSV text already fetched from object storage."""
    return read_retail_sales_csv(StringIO(content))


def dataframe_to_csv(df: pd.DataFrame) -> str:
    """Serialize a snapshot or report to CSV text (dates as ISO ``YYYY-MM-DD``)."""
    df = df.copy()
    for col in df.columns:
        if pd.api.types.is_datetime64_any_dtype(df[col]):
            df[col] = df[col].dt.strftime("%Y-%m-%d")

    buffer = StringIO()
    df.to_csv(buffer, index=False)
    return buffer.getvalue()
