from datetime import datetime, timedelta
from airflow.decorators import dag, task
from airflow.exceptions import AirflowException

from sales_analytics.config import load_config, report_settings
from sales_analytics.logger import setup_logger
from sales_analytics.reports.catalogue import REPORT_NAMES
from sales_analytics.utils.s3_paths import (
    build_cleansed_s3_key,
    build_raw_s3_key,
    build_report_s3_key,
)

# Load config
config = load_config()

AWS_CONN_ID = config["aws_conn_id"]
S3_CONFIG = config["s3"]
BUCKET = S3_CONFIG["bucket"]
RAW_FOLDER = S3_CONFIG.get("raw_folder", "retail-data/")
CLEANSED_FOLDER = S3_CONFIG.get("cleansed_folder", "cleansed-data/")
REPORTS_FOLDER = S3_CONFIG.get("reports_folder", "reports/")
SALES_KEY = build_raw_s3_key(RAW_FOLDER, S3_CONFIG["sales_key"])
CLEANSED_KEY = build_cleansed_s3_key(
    CLEANSED_FOLDER, S3_CONFIG.get("cleansed_key", "retail_sales_clean.csv")
)
REPORT_SETTINGS = report_settings(config)

# Retries cover transient S3/Snowflake errors; the timeout bounds each report
DEFAULT_ARGS = {
    "owner": "data-engineering",
    "email": ["data-alerts@company.com"],
    "email_on_failure": False,  # Disabled until SMTP is configured
    "email_on_retry": False,
    "retries": 2,
    "retry_delay": timedelta(minutes=5),
    "execution_timeout": timedelta(minutes=30),
}


@dag(
    dag_id="retail_sales_analytics",
    description="""
    Retail Sales Analytics - cleans the retail_sales ledger and publishes
    the report catalogue.

    Data Flow:
    1. Extract: Load retail_sales.csv from S3
    2. Validate: Drop rows failing the raw schema (ids, dates, types)
    3. Clean: Remove incomplete rows, impute missing ages per category
    4. Validate: Enforce the cleaned snapshot invariants
    5. Explore + Report: Summary counts and one mapped task per report
    6. Load: Cleaned snapshot to S3 and Snowflake, reports to S3
    """,
    start_date=datetime(2026, 1, 1),
    schedule="@daily",
    catchup=False,
    max_active_runs=1,
    default_args=DEFAULT_ARGS,
    tags=["retail", "analytics", "reports"],
)
def retail_sales_analytics():
    """
    Retail Sales Analytics DAG

    Cleaning must finish before any report runs; reports are independent
    mapped tasks, so one failed report does not block the others.
    """
    from sales_analytics.etl.clean import clean_retail_sales
    from sales_analytics.etl.explore import summarize_retail_sales
    from sales_analytics.etl.extract_s3 import extract_retail_sales
    from sales_analytics.etl.load_s3_csv import write_dataframe_csv_to_s3
    from sales_analytics.etl.load_snowflake import (
        ensure_snowflake_infrastructure,
        load_retail_sales_to_snowflake,
    )
    from sales_analytics.reports.catalogue import run_report
    from sales_analytics.validations.validate_inputs import validate_retail_sales
    from sales_analytics.validations.validate_outputs import validate_retail_sales_clean

    logger = setup_logger("dags.retail_sales_analytics")

    @task(task_id="extract_raw_data")
    def extract():
        """Bulk load the raw ledger from S3"""
        try:
            sales_df = extract_retail_sales(
                aws_conn_id=AWS_CONN_ID,
                bucket=BUCKET,
                sales_key=SALES_KEY,
            )
            logger.info(f"✓ Extracted {len(sales_df)} retail_sales records")
            return sales_df
        except Exception as e:
            logger.error(f"✗ Extraction failed: {str(e)}")
            raise AirflowException(f"Data extraction failed: {str(e)}")

    @task(
        task_id="validate_input_data",
        doc_md="""
        Validates the raw ledger against the input schema.

        **Quality Checks:**
        - transaction_id: non-null, unique (first occurrence kept)
        - customer_id, category, sale_date, sale_time: non-null, parseable
        - quantity > 0; price_per_unit, cogs, total_sale >= 0 (nulls allowed)
        """,
    )
    def validate_inputs(sales_df):
        """Validate raw data quality"""
        try:
            valid_df, dropped = validate_retail_sales(sales_df)
            logger.info(f"✓ Input validation passed: {len(valid_df)} valid ({dropped} dropped)")
            return valid_df
        except Exception as e:
            logger.error(f"✗ Input validation failed: {str(e)}")
            raise

    @task(
        task_id="clean_data",
        doc_md="""
        Removes rows missing quantity, price_per_unit, cogs or total_sale and
        imputes null ages with the rounded category mean age.

        Fails if a category has no recorded age to impute from.
        """,
    )
    def clean(valid_df):
        """Clean the validated ledger"""
        try:
            clean_df, removed = clean_retail_sales(valid_df)
            if clean_df.empty:
                raise AirflowException("Cleaning resulted in empty dataset")
            logger.info(f"✓ Cleaning completed: {len(clean_df)} records ({removed} removed)")
            return clean_df
        except Exception as e:
            logger.error(f"✗ Cleaning failed: {str(e)}")
            raise

    @task(task_id="validate_clean_data")
    def validate_clean(clean_df):
        """Enforce the cleaned snapshot invariants"""
        try:
            snapshot = validate_retail_sales_clean(clean_df)
            logger.info(f"✓ Output validation passed: {len(snapshot)} records")
            return snapshot
        except Exception as e:
            logger.error(f"✗ Output validation failed: {str(e)}")
            raise AirflowException(f"Cleaned snapshot invalid: {str(e)}")

    @task(task_id="explore_data")
    def explore(snapshot):
        """Summary counts of the snapshot"""
        return summarize_retail_sales(snapshot)

    @task(task_id="load_clean_to_s3")
    def load_clean(snapshot):
        """Write the cleaned snapshot to the S3 cleansed zone"""
        try:
            write_dataframe_csv_to_s3(
                df=snapshot,
                aws_conn_id=AWS_CONN_ID,
                bucket=BUCKET,
                key=CLEANSED_KEY,
            )
            return f"s3://{BUCKET}/{CLEANSED_KEY}"
        except Exception as e:
            logger.error(f"✗ Cleansed load failed: {str(e)}")
            raise AirflowException(f"Cleansed load failed: {str(e)}")

    @task(task_id="run_report")
    def report(snapshot, report_name: str, ds=None):
        """Run one catalogue report and publish it to S3"""
        try:
            result = run_report(snapshot, report_name, settings=REPORT_SETTINGS)
            key = build_report_s3_key(REPORTS_FOLDER, report_name, ds or "")
            write_dataframe_csv_to_s3(
                df=result,
                aws_conn_id=AWS_CONN_ID,
                bucket=BUCKET,
                key=key,
                allow_empty=True,
            )
            return f"{report_name}: {len(result)} rows"
        except Exception as e:
            logger.error(f"✗ Report {report_name} failed: {str(e)}")
            raise AirflowException(f"Report {report_name} failed: {str(e)}")

    @task(task_id="prepare_snowflake")
    def prepare_snowflake():
        """Ensure Snowflake infrastructure exists before loading."""
        snowflake_cfg = config.get("snowflake")
        if not snowflake_cfg:
            raise AirflowException("Snowflake configuration missing in sales_analytics/config.yaml")

        if not snowflake_cfg.get("enabled", True) or not snowflake_cfg.get("bootstrap", True):
            logger.info("Snowflake bootstrap skipped")
            return "Snowflake bootstrap skipped"

        ensure_snowflake_infrastructure(
            snowflake_conn_id=snowflake_cfg.get("conn_id"),
            database=snowflake_cfg.get("database"),
            schema=snowflake_cfg.get("schema", "CLEANSED"),
            warehouse=snowflake_cfg.get("warehouse"),
            role=snowflake_cfg.get("role"),
            stage_schema=snowflake_cfg.get("stage_schema", "RAW"),
            stage_name=snowflake_cfg.get("stage_name", "S3_CLEANSED_STAGE"),
            file_format_name=snowflake_cfg.get("file_format_name", "CSV_FORMAT"),
            storage_integration=snowflake_cfg.get("storage_integration"),
            s3_bucket=BUCKET,
            s3_key=CLEANSED_KEY,
            s3_stage_url=snowflake_cfg.get("s3_stage_url"),
            aws_key_id=snowflake_cfg.get("aws_key_id"),
            aws_secret_key=snowflake_cfg.get("aws_secret_key"),
            aws_session_token=snowflake_cfg.get("aws_session_token"),
            create_stage=snowflake_cfg.get("create_stage", True),
        )
        return "Snowflake bootstrap complete"

    @task(task_id="load_to_snowflake")
    def load_to_snowflake():
        """Replace retail_sales in Snowflake with the cleansed snapshot."""
        snowflake_cfg = config.get("snowflake")
        if not snowflake_cfg:
            raise AirflowException("Snowflake configuration missing in sales_analytics/config.yaml")

        if not snowflake_cfg.get("enabled", True):
            logger.warning("Snowflake load skipped (snowflake.enabled = false)")
            return "Snowflake load skipped"

        row_count = load_retail_sales_to_snowflake(
            snowflake_conn_id=snowflake_cfg.get("conn_id"),
            s3_bucket=BUCKET,
            s3_key=CLEANSED_KEY,
            database=snowflake_cfg.get("database"),
            schema=snowflake_cfg.get("schema", "CLEANSED"),
            warehouse=snowflake_cfg.get("warehouse"),
            role=snowflake_cfg.get("role"),
            stage_schema=snowflake_cfg.get("stage_schema", "RAW"),
            stage_name=snowflake_cfg.get("stage_name", "S3_CLEANSED_STAGE"),
            file_format_name=snowflake_cfg.get("file_format_name", "CSV_FORMAT"),
            table_name=snowflake_cfg.get("table_name", "RETAIL_SALES"),
            truncate_before_load=snowflake_cfg.get("truncate_before_load", True),
            on_error=snowflake_cfg.get("on_error", "ABORT_STATEMENT"),
        )
        return f"Snowflake load complete: {row_count} rows"

    # Define task dependencies
    extracted = extract()
    validated = validate_inputs(extracted)
    cleaned = clean(validated)
    snapshot = validate_clean(cleaned)

    explore(snapshot)
    report.partial(snapshot=snapshot).expand(report_name=REPORT_NAMES)
    load_clean(snapshot) >> prepare_snowflake() >> load_to_snowflake()


# Instantiate DAG
retail_sales_analytics()
