"""
Unit tests for the report catalogue and the in-process pipeline.
"""

import pytest
import pandas as pd

from sales_analytics.etl.clean import AgeImputationError
from sales_analytics.etl.csv_io import parse_retail_sales_csv
from sales_analytics.pipeline import run_pipeline, run_pipeline_from_csv
from sales_analytics.reports import catalogue
from sales_analytics.reports.catalogue import REPORT_NAMES, build_catalogue, run_report, run_reports


class TestCatalogue:
    """Test suite for the named report registry."""

    def test_every_report_runs_on_snapshot(self, snapshot_df):
        results, errors = run_reports(snapshot_df)
        assert errors == {}
        assert set(results) == set(REPORT_NAMES)
        for name, result in results.items():
            assert isinstance(result, pd.DataFrame), name

    def test_settings_are_bound(self, snapshot_df):
        settings = {
            "top_n": 1,
            "margin_threshold": 40.0,
            "outlier_percentile": 0.95,
            "morning_cutoff_hour": 16,
            "rolling_window": 3,
            "high_value_threshold": 1000.0,
        }
        result = run_report(snapshot_df, "top_customers", settings=settings)
        assert result["customer_id"].tolist() == [1]

    def test_unknown_report_raises(self, snapshot_df):
        with pytest.raises(KeyError):
            run_report(snapshot_df, "no_such_report")
        with pytest.raises(KeyError):
            run_reports(snapshot_df, names=["top_customers", "no_such_report"])

    def test_failing_report_does_not_stop_others(self, snapshot_df, monkeypatch):
        """One report's error is recorded while the rest still run."""
        original = catalogue.build_catalogue

        def broken_catalogue(settings=None):
            reports = original(settings)

            def explode(df):
                raise RuntimeError("store unavailable")

            reports["rfm"] = explode
            return reports

        monkeypatch.setattr(catalogue, "build_catalogue", broken_catalogue)
        results, errors = run_reports(snapshot_df, names=["rfm", "basket_size", "top_customers"])
        assert errors == {"rfm": "store unavailable"}
        assert set(results) == {"basket_size", "top_customers"}

    def test_reports_leave_snapshot_unchanged(self, snapshot_df):
        before = snapshot_df.copy()
        run_reports(snapshot_df)
        pd.testing.assert_frame_equal(snapshot_df, before)

    def test_catalogue_names(self):
        names = set(build_catalogue())
        for expected in [
            "top_customers", "age_gender_segments", "repeat_vs_one_time_customers",
            "monthly_sales_trend", "day_part_sales", "weekday_vs_weekend",
            "category_rankings", "category_profitability", "basket_size",
            "transaction_margins", "margin_classification", "rfm",
            "rolling_category_sales", "customer_sale_ranking",
            "percentile_outliers", "age_outlier_audit",
        ]:
            assert expected in names


class TestPipeline:
    """End-to-end run from raw CSV text to reports."""

    def test_run_pipeline(self, raw_csv_text):
        result = run_pipeline(parse_retail_sales_csv(raw_csv_text), report_names=["top_customers", "rfm"])
        assert result.invalid_rows == 2
        assert result.incomplete_rows == 1
        assert result.summary == {"total_records": 4, "total_customers": 4, "total_categories": 2}
        assert set(result.reports) == {"top_customers", "rfm"}
        assert result.errors == {}
        assert result.reports["top_customers"].loc[0, "customer_id"] == 15

    def test_run_pipeline_from_csv(self, raw_csv_text, test_output_dir):
        path = test_output_dir / "pipeline_sales.csv"
        path.write_text(raw_csv_text)
        result = run_pipeline_from_csv(path)
        assert not result.clean["age"].isna().any()
        assert len(result.reports) == len(REPORT_NAMES)

    def test_every_raw_row_accounted_for(self, raw_csv_text):
        raw = parse_retail_sales_csv(raw_csv_text)
        result = run_pipeline(raw, report_names=[])
        assert result.invalid_rows + result.incomplete_rows + len(result.clean) == len(raw)

    def test_implausible_ages_reach_reports(self):
        """Ages of 150 and -1 keep their sales and show up in the age audit."""
        csv = (
            "transactions_id,sale_date,sale_time,customer_id,gender,age,category,quantiy,price_per_unit,cogs,total_sale\n"
            "1,2022-11-05,10:15:00,11,Female,20,Beauty,2,50,20,100\n"
            "2,2022-11-05,11:15:00,12,Male,150,Beauty,1,30,12,30\n"
            "3,2022-11-06,12:15:00,13,Male,-1,Beauty,1,30,12,30\n"
        )
        result = run_pipeline(
            parse_retail_sales_csv(csv),
            report_names=["age_outlier_audit", "category_rankings"],
        )
        assert result.invalid_rows == 0
        assert result.summary["total_records"] == 3
        audit = result.reports["age_outlier_audit"]
        assert audit["records"].tolist() == [2]
        assert audit["avg_age"].tolist() == [pytest.approx(74.5)]
        assert result.reports["category_rankings"]["total_sales"].tolist() == [pytest.approx(160.0)]

    def test_imputation_failure_surfaces(self):
        csv = (
            "transactions_id,sale_date,sale_time,customer_id,gender,age,category,quantiy,price_per_unit,cogs,total_sale\n"
            "1,2022-11-05,10:15:00,11,Female,20,Beauty,2,50,20,100\n"
            "2,2022-11-05,11:15:00,12,Male,,Electronics,1,30,12,30\n"
        )
        with pytest.raises(AgeImputationError):
            run_pipeline(parse_retail_sales_csv(csv))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
