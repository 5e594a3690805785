"""
Parsers for backend payloads.

- Base helpers: dates, numbers, display formatting
- Report projections: report rows and chart series
"""

from .base import (
    PayloadError,
    parse_api_date,
    parse_float,
    parse_int,
    format_quantity,
    format_money,
)
from .reports import parse_report_rows, parse_sales_by_type, parse_sales_over_time

__all__ = [
    # Base
    "PayloadError",
    "parse_api_date",
    "parse_float",
    "parse_int",
    "format_quantity",
    "format_money",
    # Reports
    "parse_report_rows",
    "parse_sales_by_type",
    "parse_sales_over_time",
]
