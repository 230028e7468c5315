import pandera.pandas as pa
from pandera.pandas import Check, Column, DataFrameSchema

from .input_schemas import SALE_TIME_PATTERN


retail_sales_clean_schema = DataFrameSchema(
    {
        # Identifiers
        "transaction_id": Column(int, nullable=False, unique=True),
        "customer_id": Column(int, nullable=False),

        # Date dimensions
        "sale_date": Column(pa.DateTime, nullable=False),
        "sale_time": Column(str, Check.str_matches(SALE_TIME_PATTERN), nullable=False),

        # Customer / product dimensions
        "gender": Column(str, nullable=True),
        "age": Column(int, nullable=False),  # Implausible ages are audited, not dropped
        "category": Column(str, nullable=False),

        # Measures (complete after cleaning)
        "quantity": Column(int, Check.gt(0), nullable=False),
        "price_per_unit": Column(float, Check.ge(0), nullable=False),
        "cogs": Column(float, Check.ge(0), nullable=False),
        "total_sale": Column(float, Check.ge(0), nullable=False),
    },
    strict=True
)
