"""
Projections of report-shaped backend rows.

Each parser takes the decoded JSON list returned by one endpoint and turns it
into the view the dashboard renders:

- /api/reports          -> list[ReportRow]
- /api/sales_by_type    -> bar ChartSeries of quantity per fuel type
- /api/sales_over_time  -> line ChartSeries of sales per date

Parsers are pure: the same rows always produce an equal projection.
"""
from __future__ import annotations
from typing import Any, Type, TypeVar
from pydantic import BaseModel, ValidationError
from .base import PayloadError
from ..models import ChartSeries, ReportRow, SalesByTypeRow, SalesOverTimeRow

M = TypeVar("M", bound=BaseModel)


def _parse_rows(payload: Any, model: Type[M]) -> list[M]:
    if not isinstance(payload, list):
        raise PayloadError(f"Expected a list of rows, got {type(payload).__name__}")
    try:
        return [model.model_validate(row) for row in payload]
    except ValidationError as e:
        raise PayloadError(f"Invalid {model.__name__}: {e.error_count()} error(s)") from e


def parse_report_rows(payload: Any) -> list[ReportRow]:
    return _parse_rows(payload, ReportRow)


def parse_sales_by_type(payload: Any) -> ChartSeries:
    rows = _parse_rows(payload, SalesByTypeRow)
    return ChartSeries(
        kind="bar",
        title="Sales by Fuel Type",
        label="Total Quantity Sold",
        labels=[r.fuel_type for r in rows],
        values=[r.total_quantity for r in rows],
    )


def parse_sales_over_time(payload: Any) -> ChartSeries:
    rows = _parse_rows(payload, SalesOverTimeRow)
    return ChartSeries(
        kind="line",
        title="Sales Over Time",
        label="Total Sales Over Time",
        labels=[r.date for r in rows],
        values=[r.total_sales for r in rows],
    )
