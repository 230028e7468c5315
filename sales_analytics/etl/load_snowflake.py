from typing import Optional

from airflow.exceptions import AirflowException
from airflow.providers.snowflake.hooks.snowflake import SnowflakeHook

from sales_analytics.logger import setup_logger
from sales_analytics.utils.s3_paths import split_s3_key

logger = setup_logger("etl.load_snowflake")

RETAIL_SALES_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    transaction_id INTEGER PRIMARY KEY,
    sale_date DATE,
    sale_time TIME,
    customer_id INTEGER,
    gender VARCHAR(15),
    age INTEGER,
    category VARCHAR(15),
    quantity INTEGER,
    price_per_unit FLOAT,
    cogs FLOAT,
    total_sale FLOAT
)
"""


def _qualify(name: str, database: Optional[str], schema: Optional[str]) -> str:
    if "." in name:
        return name
    if database and schema:
        return f"{database}.{schema}.{name}"
    if schema:
        return f"{schema}.{name}"
    return name


def _stage_url(s3_bucket: str, s3_key: Optional[str]) -> str:
    # The stage points at the folder holding the cleansed snapshot
    prefix = split_s3_key(s3_key)[0] if s3_key else ""
    return f"s3://{s3_bucket}/{prefix}/" if prefix else f"s3://{s3_bucket}/"


def _file_format_sql(file_format_qualified: str) -> str:
    return f"""
    CREATE FILE FORMAT IF NOT EXISTS {file_format_qualified}
        TYPE = 'CSV'
        FIELD_DELIMITER = ','
        SKIP_HEADER = 1
        NULL_IF = ('NULL', 'null', '')
        EMPTY_FIELD_AS_NULL = TRUE
        COMPRESSION = 'NONE'
    """


def _stage_sql(
    stage_qualified: str,
    stage_url: str,
    file_format_qualified: str,
    storage_integration: Optional[str],
    aws_key_id: Optional[str],
    aws_secret_key: Optional[str],
    aws_session_token: Optional[str],
) -> str:
    stage_parts = [
        f"CREATE STAGE IF NOT EXISTS {stage_qualified}",
        f"URL = '{stage_url}'",
        f"FILE_FORMAT = {file_format_qualified}",
    ]
    if storage_integration:
        stage_parts.append(f"STORAGE_INTEGRATION = {storage_integration}")
    else:
        creds = [
            f"AWS_KEY_ID = '{aws_key_id}'",
            f"AWS_SECRET_KEY = '{aws_secret_key}'",
        ]
        if aws_session_token:
            creds.append(f"AWS_TOKEN = '{aws_session_token}'")
        stage_parts.append(f"CREDENTIALS = ({' '.join(creds)})")
    return " ".join(stage_parts)


def _can_create_stage(
    create_stage: bool,
    storage_integration: Optional[str],
    aws_key_id: Optional[str],
    aws_secret_key: Optional[str],
) -> bool:
    if create_stage and not storage_integration and not (aws_key_id and aws_secret_key):
        logger.warning(
            "Snowflake stage creation requested but no storage_integration or "
            "AWS credentials provided. Assuming the stage already exists."
        )
        return False
    return create_stage


def ensure_snowflake_infrastructure(
    *,
    snowflake_conn_id: str,
    database: str,
    schema: str,
    warehouse: str,
    role: Optional[str] = None,
    stage_schema: str = "RAW",
    stage_name: str = "S3_CLEANSED_STAGE",
    file_format_name: str = "CSV_FORMAT",
    storage_integration: Optional[str] = None,
    s3_bucket: Optional[str] = None,
    s3_key: Optional[str] = None,
    s3_stage_url: Optional[str] = None,
    aws_key_id: Optional[str] = None,
    aws_secret_key: Optional[str] = None,
    aws_session_token: Optional[str] = None,
    create_stage: bool = True,
    warehouse_size: str = "XSMALL",
    auto_suspend_seconds: int = 300,
) -> None:
    """
    Idempotently create the warehouse, database, schemas, CSV file format and
    the external stage over the cleansed snapshot folder.
    """
    if not snowflake_conn_id:
        raise AirflowException("Snowflake connection ID is required")
    if not database or not schema or not warehouse:
        raise AirflowException("Snowflake database, schema, and warehouse are required")

    stage_url = s3_stage_url
    if create_stage and not stage_url:
        if not s3_bucket:
            raise AirflowException("S3 bucket is required to create Snowflake stage")
        stage_url = _stage_url(s3_bucket, s3_key)
        logger.info("Constructed Snowflake stage URL: %s", stage_url)

    create_stage = _can_create_stage(create_stage, storage_integration, aws_key_id, aws_secret_key)

    stage_qualified = _qualify(stage_name, database, stage_schema)
    file_format_qualified = _qualify(file_format_name, database, stage_schema)

    hook = SnowflakeHook(snowflake_conn_id=snowflake_conn_id)

    try:
        if role:
            hook.run(f"USE ROLE {role}")

        hook.run(f"""
        CREATE WAREHOUSE IF NOT EXISTS {warehouse}
            WAREHOUSE_SIZE = {warehouse_size}
            AUTO_SUSPEND = {auto_suspend_seconds}
            AUTO_RESUME = TRUE
            INITIALLY_SUSPENDED = TRUE
        """)
        hook.run(f"CREATE DATABASE IF NOT EXISTS {database}")
        hook.run(f"CREATE SCHEMA IF NOT EXISTS {database}.{schema}")
        hook.run(f"CREATE SCHEMA IF NOT EXISTS {database}.{stage_schema}")
        hook.run(_file_format_sql(file_format_qualified))

        if create_stage:
            hook.run(_stage_sql(
                stage_qualified,
                stage_url,
                file_format_qualified,
                storage_integration,
                aws_key_id,
                aws_secret_key,
                aws_session_token,
            ))

        logger.info("Snowflake infrastructure ensured for %s.%s", database, schema)

    except Exception as exc:
        logger.error("Snowflake bootstrap failed: %s", str(exc), exc_info=True)
        raise AirflowException(f"Snowflake bootstrap failed: {str(exc)}") from exc


def load_retail_sales_to_snowflake(
    *,
    snowflake_conn_id: str,
    s3_bucket: str,
    s3_key: str,
    database: str,
    schema: str,
    warehouse: str,
    role: Optional[str] = None,
    stage_schema: str = "RAW",
    stage_name: str = "S3_CLEANSED_STAGE",
    file_format_name: str = "CSV_FORMAT",
    table_name: str = "RETAIL_SALES",
    truncate_before_load: bool = True,
    on_error: str = "ABORT_STATEMENT",
) -> int:
    """
    Replace the contents of the ``retail_sales`` table with the cleansed
    snapshot using COPY INTO from the external stage.

    The stage is created by ``ensure_snowflake_infrastructure``. Returns the
    table row count after the load.
    """
    if not snowflake_conn_id:
        raise AirflowException("Snowflake connection ID is required")
    if not s3_bucket or not s3_key:
        raise AirflowException("S3 bucket and key are required for Snowflake load")
    if not database or not schema or not warehouse:
        raise AirflowException("Snowflake database, schema, and warehouse are required")

    _, filename = split_s3_key(s3_key)
    if not filename:
        raise AirflowException(f"Invalid S3 key: {s3_key}")

    stage_qualified = _qualify(stage_name, database, stage_schema)
    file_format_qualified = _qualify(file_format_name, database, stage_schema)
    table_qualified = _qualify(table_name, database, schema)

    logger.info(
        "Preparing Snowflake load from s3://%s/%s into %s",
        s3_bucket,
        s3_key,
        table_qualified,
    )

    hook = SnowflakeHook(snowflake_conn_id=snowflake_conn_id)

    try:
        if role:
            hook.run(f"USE ROLE {role}")
        hook.run(f"USE WAREHOUSE {warehouse}")
        hook.run(f"USE DATABASE {database}")
        hook.run(f"USE SCHEMA {schema}")

        hook.run(RETAIL_SALES_DDL.format(table=table_qualified))

        if truncate_before_load:
            hook.run(f"TRUNCATE TABLE {table_qualified}")

        hook.run(f"""
        COPY INTO {table_qualified}
        FROM @{stage_qualified}/{filename}
        FILE_FORMAT = (FORMAT_NAME = {file_format_qualified})
        ON_ERROR = '{on_error}'
        FORCE = TRUE
        """)

        count = hook.get_first(f"SELECT COUNT(*) FROM {table_qualified}")
        row_count = int(count[0]) if count else 0
        logger.info("Snowflake load complete: %s rows in %s", row_count, table_qualified)
        return row_count

    except Exception as exc:
        logger.error("Snowflake load failed: %s", str(exc), exc_info=True)
        raise AirflowException(f"Snowflake load failed: {str(exc)}") from exc
