import pandas as pd
from airflow.providers.amazon.aws.hooks.s3 import S3Hook
from botocore.exceptions import ClientError, NoCredentialsError

from sales_analytics.etl.csv_io import dataframe_to_csv
from sales_analytics.logger import setup_logger

logger = setup_logger("etl.load_s3")


def write_dataframe_csv_to_s3(
    df: pd.DataFrame,
    aws_conn_id: str,
    bucket: str,
    key: str,
    allow_empty: bool = False,
) -> None:
    """
    Write the cleaned snapshot or a report result to S3 as CSV.

    Reports may legitimately be empty (e.g. no age outliers); pass
    ``allow_empty=True`` for those so a header-only file is written.
    """
    if not bucket or not key:
        raise ValueError("Bucket and key must not be empty")
    if df.empty and not allow_empty:
        raise ValueError(f"Refusing to write an empty snapshot to s3://{bucket}/{key}")

    csv_data = dataframe_to_csv(df)
    logger.info(f"Writing {len(df)} records ({len(csv_data)} bytes) to s3://{bucket}/{key}")

    try:
        S3Hook(aws_conn_id=aws_conn_id).load_string(
            string_data=csv_data,
            key=key,
            bucket_name=bucket,
            replace=True,
        )
    except NoCredentialsError as e:
        logger.error(f"AWS credentials not found for connection '{aws_conn_id}'")
        raise ValueError(f"Invalid AWS connection '{aws_conn_id}'") from e
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        if error_code == "NoSuchBucket":
            raise ValueError(f"S3 bucket '{bucket}' not found") from e
        if error_code == "AccessDenied":
            raise PermissionError(f"Access denied to S3 bucket '{bucket}'") from e
        logger.error(f"S3 write failed: {error_code} - {e}")
        raise RuntimeError(f"Failed to write s3://{bucket}/{key}: {error_code}") from e

    logger.info(f"Successfully written to S3: s3://{bucket}/{key}")
