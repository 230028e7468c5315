"""
Unit tests for the raw and cleaned retail_sales schema gates.

The raw gate drops rows that fail row-level checks and reports how many were
removed. The cleaned gate never drops: any violation aborts the pipeline.
"""

import pytest
import pandas as pd
from pandera.errors import SchemaErrors

from sales_analytics.etl.csv_io import parse_retail_sales_csv
from sales_analytics.validations.input_schemas import retail_sales_raw_schema
from sales_analytics.validations.output_schemas import retail_sales_clean_schema
from sales_analytics.validations.validate_inputs import validate_retail_sales
from sales_analytics.validations.validate_outputs import validate_retail_sales_clean


class TestRawSalesValidation:
    """Test suite for raw ledger validation."""

    def test_valid_ledger_passes_validation(self, make_sales):
        """A well-formed ledger keeps every row."""
        df = make_sales([{"age": None}, {}, {"quantity": None}])
        df["age"] = df["age"].astype("Int64")
        df["quantity"] = df["quantity"].astype("Int64")
        cleaned_df, dropped = validate_retail_sales(df)
        assert len(cleaned_df) == 3
        assert dropped == 0

    def test_null_and_duplicate_transaction_ids_dropped(self, raw_csv_text):
        """Null ids are dropped; a duplicated id keeps its first row."""
        raw = parse_retail_sales_csv(raw_csv_text)
        cleaned_df, dropped = validate_retail_sales(raw)
        assert dropped == 2
        assert sorted(cleaned_df["transaction_id"].tolist()) == [1, 2, 3, 4, 5]

    def test_missing_measures_are_not_rejected(self, raw_csv_text):
        """Incomplete measures are the cleaning stage's job, not the gate's."""
        raw = parse_retail_sales_csv(raw_csv_text)
        cleaned_df, _ = validate_retail_sales(raw)
        assert 4 in cleaned_df["transaction_id"].tolist()

    def test_negative_measures_dropped(self, make_sales):
        """Negative quantity or price rows are dropped."""
        df = make_sales([{}, {"quantity": -3}, {"price_per_unit": -1.0}])
        cleaned_df, dropped = validate_retail_sales(df)
        assert dropped == 2
        assert cleaned_df["transaction_id"].tolist() == [1]

    def test_unparseable_sale_time_dropped(self, make_sales):
        """sale_time must be HH:MM:SS."""
        df = make_sales([{}, {"sale_time": "quarter past ten"}])
        cleaned_df, dropped = validate_retail_sales(df)
        assert dropped == 1
        assert len(cleaned_df) == 1

    def test_implausible_age_kept(self, make_sales):
        """Age is not range-checked at the raw gate."""
        df = make_sales([{"age": 150}, {"age": -1}, {}])
        cleaned_df, dropped = validate_retail_sales(df)
        assert dropped == 0
        assert cleaned_df["age"].tolist() == [150, -1, 30]

    def test_all_rows_invalid_raises(self, make_sales):
        """An empty result after validation aborts."""
        df = make_sales([{"quantity": -1}, {"quantity": 0}])
        with pytest.raises(ValueError, match="All rows failed"):
            validate_retail_sales(df)


class TestCleanSalesValidation:
    """Test suite for cleaned snapshot validation."""

    def test_cleaned_snapshot_passes(self, snapshot_df):
        """A cleaned snapshot satisfies the output schema."""
        cleaned_df = validate_retail_sales_clean(snapshot_df)
        assert len(cleaned_df) == len(snapshot_df)

    def test_null_age_rejected(self, make_sales):
        """An unimputed age aborts instead of being dropped."""
        df = make_sales([{}, {}])
        df["age"] = pd.array([30, None], dtype="Int64")
        with pytest.raises(SchemaErrors):
            validate_retail_sales_clean(df)

    def test_zero_quantity_rejected(self, make_sales):
        """quantity must be strictly positive; the gate does not drop rows."""
        df = make_sales([{}, {"quantity": 0}, {}])
        with pytest.raises(SchemaErrors):
            validate_retail_sales_clean(df)

    def test_extra_column_rejected(self, snapshot_df):
        """The cleaned schema is strict."""
        df = snapshot_df.assign(discount=0.0)
        with pytest.raises(SchemaErrors):
            validate_retail_sales_clean(df)

    def test_implausible_ages_pass(self, make_sales):
        """Out-of-range ages are left for the age audit."""
        df = make_sales([{"age": -1}, {"age": 150}, {}])
        assert len(validate_retail_sales_clean(df)) == 3


class TestSchemaCompliance:
    """Test that schemas are properly defined and enforceable."""

    def test_raw_schema_defined(self):
        assert "transaction_id" in retail_sales_raw_schema.columns
        assert retail_sales_raw_schema.columns["age"].nullable
        assert retail_sales_raw_schema.columns["total_sale"].nullable

    def test_clean_schema_requires_measures_and_age(self):
        for col in ["quantity", "price_per_unit", "cogs", "total_sale", "age"]:
            assert not retail_sales_clean_schema.columns[col].nullable
        assert retail_sales_clean_schema.columns["transaction_id"].unique


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
