"""
Retail sales analytics pipeline.

Raw ``retail_sales`` ledger -> validated -> cleaned snapshot -> independent reports.
"""

__version__ = "0.1.0"
