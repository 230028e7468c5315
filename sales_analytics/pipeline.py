"""
In-process run of the whole pipeline: validate -> clean -> validate ->
explore -> reports.

The Airflow DAG runs the same stages as separate tasks; this entry point is
for notebooks, local runs and tests.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pandas as pd

from sales_analytics.etl.clean import clean_retail_sales
from sales_analytics.etl.csv_io import read_retail_sales_csv
from sales_analytics.etl.explore import summarize_retail_sales
from sales_analytics.logger import setup_logger
from sales_analytics.reports.catalogue import run_reports
from sales_analytics.validations.validate_inputs import validate_retail_sales
from sales_analytics.validations.validate_outputs import validate_retail_sales_clean

logger = setup_logger("pipeline")


@dataclass
class PipelineResult:
    clean: pd.DataFrame
    summary: dict[str, int]
    reports: dict[str, pd.DataFrame]
    errors: dict[str, str] = field(default_factory=dict)
    invalid_rows: int = 0
    incomplete_rows: int = 0


def prepare_snapshot(raw_df: pd.DataFrame) -> tuple[pd.DataFrame, int, int]:
    """
    Validate and clean the raw ledger into the snapshot the reports read.

    Returns the snapshot, the rows dropped by validation and the rows removed
    as incomplete.
    """
    valid_df, invalid_rows = validate_retail_sales(raw_df)
    clean_df, incomplete_rows = clean_retail_sales(valid_df)
    clean_df = validate_retail_sales_clean(clean_df)
    return clean_df, invalid_rows, incomplete_rows


def run_pipeline(
    raw_df: pd.DataFrame,
    report_names: Optional[Iterable[str]] = None,
    settings: Optional[dict[str, Any]] = None,
) -> PipelineResult:
    logger.info(f"Pipeline started on {len(raw_df)} raw rows")

    clean_df, invalid_rows, incomplete_rows = prepare_snapshot(raw_df)
    summary = summarize_retail_sales(clean_df)
    reports, errors = run_reports(clean_df, names=report_names, settings=settings)

    logger.info(
        f"✓ Pipeline finished: {len(reports)} reports, {len(errors)} failed"
    )
    return PipelineResult(
        clean=clean_df,
        summary=summary,
        reports=reports,
        errors=errors,
        invalid_rows=invalid_rows,
        incomplete_rows=incomplete_rows,
    )


def run_pipeline_from_csv(
    path: Union[str, Path],
    report_names: Optional[Iterable[str]] = None,
    settings: Optional[dict[str, Any]] = None,
) -> PipelineResult:
    return run_pipeline(read_retail_sales_csv(path), report_names=report_names, settings=settings)
