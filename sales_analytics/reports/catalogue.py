"""
Named registry of reports over the cleaned snapshot.

Each entry maps a report name to a callable taking only the cleaned DataFrame;
tunable reports are bound to the ``reports`` settings from the config.
"""

from functools import partial
from typing import Any, Callable, Iterable, Optional

import pandas as pd

from sales_analytics.config import report_settings
from sales_analytics.logger import setup_logger
from sales_analytics.reports import categories, customers, margins, outliers, time_trends

logger = setup_logger("reports.catalogue")

Report = Callable[[pd.DataFrame], pd.DataFrame]


def build_catalogue(settings: Optional[dict[str, Any]] = None) -> dict[str, Report]:
    """
    Map report names to ready-to-run callables.

    ``settings`` is a ``reports`` settings dict as returned by
    ``sales_analytics.config.report_settings``; defaults are used when omitted.
    """
    settings = settings or report_settings()
    return {
        # Customers
        "top_customers": partial(customers.top_customers, n=settings["top_n"]),
        "age_gender_segments": customers.age_gender_segments,
        "repeat_vs_one_time_customers": customers.repeat_vs_one_time_customers,
        "rfm": customers.rfm,
        "customer_sale_ranking": customers.customer_sale_ranking,
        # Time
        "monthly_sales_trend": time_trends.monthly_sales_trend,
        "best_month_by_year": time_trends.best_month_by_year,
        "hourly_sales": time_trends.hourly_sales,
        "day_part_sales": partial(
            time_trends.day_part_sales, morning_cutoff_hour=settings["morning_cutoff_hour"]
        ),
        "weekday_vs_weekend": time_trends.weekday_vs_weekend,
        "rolling_category_sales": partial(
            time_trends.rolling_category_sales, window=settings["rolling_window"]
        ),
        # Categories
        "category_rankings": categories.category_rankings,
        "category_profitability": categories.category_profitability,
        "basket_size": categories.basket_size,
        "transactions_by_gender_category": categories.transactions_by_gender_category,
        "unique_customers_by_category": categories.unique_customers_by_category,
        # Margins
        "transaction_margins": margins.transaction_margins,
        "margin_classification": partial(
            margins.margin_classification, threshold=settings["margin_threshold"]
        ),
        # Outliers
        "percentile_outliers": partial(
            outliers.percentile_outliers, q=settings["outlier_percentile"]
        ),
        "age_outlier_audit": outliers.age_outlier_audit,
        "high_value_transactions": partial(
            outliers.high_value_transactions, threshold=settings["high_value_threshold"]
        ),
    }


REPORT_NAMES = list(build_catalogue())


def run_report(
    df: pd.DataFrame,
    name: str,
    settings: Optional[dict[str, Any]] = None,
) -> pd.DataFrame:
    """Run a single named report; unknown names raise ``KeyError``."""
    catalogue = build_catalogue(settings)
    if name not in catalogue:
        raise KeyError(f"Unknown report: {name}")

    result = catalogue[name](df)
    logger.info(f"Report {name}: {len(result)} rows")
    return result


def run_reports(
    df: pd.DataFrame,
    names: Optional[Iterable[str]] = None,
    settings: Optional[dict[str, Any]] = None,
) -> tuple[dict[str, pd.DataFrame], dict[str, str]]:
    """
    Run several reports against the same snapshot.

    A failing report does not stop the others: its error message is collected
    in the second mapping and the remaining reports still run.
    """
    catalogue = build_catalogue(settings)
    selected = list(names) if names is not None else list(catalogue)

    unknown = [name for name in selected if name not in catalogue]
    if unknown:
        raise KeyError(f"Unknown reports: {unknown}")

    results: dict[str, pd.DataFrame] = {}
    errors: dict[str, str] = {}
    for name in selected:
        try:
            results[name] = catalogue[name](df)
            logger.info(f"✓ Report {name}: {len(results[name])} rows")
        except Exception as e:
            logger.error(f"✗ Report {name} failed: {str(e)}", exc_info=True)
            errors[name] = str(e)

    if errors:
        logger.warning(f"{len(errors)} of {len(selected)} reports failed: {sorted(errors)}")
    return results, errors
