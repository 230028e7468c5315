import logging
import sys


def setup_logger(name: str = "sales_analytics", level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger instance for the analytics pipeline.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)

    return logger
