import pandera.pandas as pa
from pandera.pandas import Check, Column, DataFrameSchema

SALE_TIME_PATTERN = r"^\d{2}:\d{2}:\d{2}$"


retail_sales_raw_schema = DataFrameSchema(
    {
        # Identifiers (a duplicate keeps its first occurrence)
        "transaction_id": Column(
            "Int64",
            nullable=False,
            coerce=True,
            unique=True,
            report_duplicates="exclude_first",
        ),
        "customer_id": Column("Int64", nullable=False, coerce=True),

        # When
        "sale_date": Column(pa.DateTime, nullable=False),
        "sale_time": Column(str, Check.str_matches(SALE_TIME_PATTERN), nullable=False),

        # Who / what
        "gender": Column(str, nullable=True),
        "age": Column("Int64", nullable=True, coerce=True),  # Imputed during cleaning; range left to the age audit
        "category": Column(str, nullable=False),

        # Measures (nulls are removed by the cleaning stage, not here)
        "quantity": Column("Int64", Check.gt(0), nullable=True, coerce=True),
        "price_per_unit": Column(float, Check.ge(0), nullable=True, coerce=True),
        "cogs": Column(float, Check.ge(0), nullable=True, coerce=True),
        "total_sale": Column(float, Check.ge(0), nullable=True, coerce=True),
    },
    strict=False  # Extra export columns are dropped on read
)
