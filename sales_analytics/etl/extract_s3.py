import pandas as pd
from airflow.providers.amazon.aws.hooks.s3 import S3Hook

from sales_analytics.etl.csv_io import parse_retail_sales_csv
from sales_analytics.logger import setup_logger

logger = setup_logger('etl.extract_s3')


def extract_retail_sales(aws_conn_id: str, bucket: str, sales_key: str) -> pd.DataFrame:
    """
    Bulk load the raw retail_sales CSV from S3 into a typed DataFrame.
    """
    hook = S3Hook(aws_conn_id=aws_conn_id)

    logger.info(f"Extracting retail_sales from s3://{bucket}/{sales_key}")
    content = hook.read_key(key=sales_key, bucket_name=bucket)
    if not content:
        raise ValueError(f"s3://{bucket}/{sales_key} is empty")

    sales_df = parse_retail_sales_csv(content)
    logger.info(f"Successfully extracted {len(sales_df)} rows from retail_sales")
    return sales_df


# Data Lake Structure:
# <bucket>
# │
# ├── retail-data/
# │   └── retail_sales.csv
# │
# ├── cleansed-data/
# │   └── retail_sales_clean.csv
# │
# └── reports/
#     └── <run date>/<report name>.csv
