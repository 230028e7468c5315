"""
Pytest configuration and fixtures for the analytics tests.

This file is automatically discovered by pytest and provides
shared fixtures and configuration for all test modules.
"""

import pytest
import pandas as pd
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

DEFAULT_ROW = {
    "sale_date": "2022-11-05",
    "sale_time": "10:15:00",
    "gender": "Female",
    "age": 30,
    "category": "Clothing",
    "quantity": 1,
    "price_per_unit": 50.0,
    "cogs": 20.0,
    "total_sale": 50.0,
}


def build_sales_frame(rows):
    """
    Build a cleaned-shaped retail_sales frame from partial row dicts.

    Missing transaction ids are numbered from 1, missing customer ids follow
    the transaction id.
    """
    records = []
    for i, row in enumerate(rows, start=1):
        record = dict(DEFAULT_ROW)
        record["transaction_id"] = i
        record["customer_id"] = i
        record.update(row)
        records.append(record)

    df = pd.DataFrame.from_records(records)
    df["sale_date"] = pd.to_datetime(df["sale_date"])
    return df[
        [
            "transaction_id", "sale_date", "sale_time", "customer_id", "gender",
            "age", "category", "quantity", "price_per_unit", "cogs", "total_sale",
        ]
    ]


@pytest.fixture
def make_sales():
    """Factory fixture: ``make_sales([{...}, ...])`` -> DataFrame."""
    return build_sales_frame


@pytest.fixture
def snapshot_df():
    """A small cleaned snapshot spanning two categories and two months."""
    return build_sales_frame([
        {"customer_id": 1, "sale_date": "2022-01-10", "sale_time": "09:00:00", "age": 22,
         "gender": "Male", "category": "Beauty", "quantity": 2, "price_per_unit": 50.0,
         "cogs": 30.0, "total_sale": 100.0},
        {"customer_id": 1, "sale_date": "2022-02-12", "sale_time": "17:30:00", "age": 22,
         "gender": "Male", "category": "Clothing", "quantity": 4, "price_per_unit": 300.0,
         "cogs": 400.0, "total_sale": 1200.0},
        {"customer_id": 2, "sale_date": "2022-01-15", "sale_time": "15:59:00", "age": 40,
         "gender": "Female", "category": "Beauty", "quantity": 1, "price_per_unit": 25.0,
         "cogs": 20.0, "total_sale": 25.0},
        {"customer_id": 3, "sale_date": "2022-02-20", "sale_time": "16:00:00", "age": 65,
         "gender": "Female", "category": "Clothing", "quantity": 3, "price_per_unit": 100.0,
         "cogs": 100.0, "total_sale": 300.0},
    ])


@pytest.fixture
def raw_csv_text():
    """Raw ledger CSV as exported by the source system (header typos included)."""
    return (
        "transactions_id,sale_date,sale_time,customer_id,gender,age,category,quantiy,price_per_unit,cogs,total_sale\n"
        "1,2022-11-05,10:15:00,11,Female,20,Beauty,2,50,20,100\n"
        "2,2022-11-05,19:10:00,12,Male,30,Beauty,1,30,12,30\n"
        "3,2022-11-06,11:00:00,13,Male,,Beauty,4,25,10,100\n"
        "4,2022-11-07,12:30:00,14,Female,45,Clothing,,50,20,\n"
        "5,2022-11-08,08:45:00,15,Female,35,Clothing,3,300,90,900\n"
        "5,2022-11-08,08:45:00,15,Female,35,Clothing,3,300,90,900\n"
        ",2022-11-09,09:00:00,16,Male,50,Electronics,1,500,250,500\n"
    )


@pytest.fixture(scope="session")
def test_output_dir(tmp_path_factory):
    """
    Create a temporary directory for test outputs.
    """
    return tmp_path_factory.mktemp("test_output")


# Add pytest CLI options
def pytest_addoption(parser):
    """Add custom pytest options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires S3/Snowflake credentials)"
    )


def pytest_collection_modifyitems(config, items):
    """Mark integration tests for conditional execution."""
    if config.getoption("--integration"):
        # Run all tests
        return

    # Skip integration tests if flag not provided
    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
