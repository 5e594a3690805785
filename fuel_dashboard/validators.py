from __future__ import annotations
from datetime import date
from .models import FilterKind, ReportQuery

MISSING_DATES = "Please select both start and end dates"
FUTURE_DATES = "Future dates are not allowed"
REVERSED_RANGE = "Start date must be on or before end date"


class ValidationFailure(ValueError):
    """Raised when user input is rejected before any request is sent."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def validate_query(query: ReportQuery, today: date | None = None) -> None:
    """
    Raises ValidationFailure if the query must not reach the backend.

    Only custom ranges are checked; an all-time query carries no dates.
    """
    if query.filter is not FilterKind.CUSTOM:
        return
    if query.start_date is None or query.end_date is None:
        raise ValidationFailure(MISSING_DATES)

    today = today or date.today()
    if query.start_date > today or query.end_date > today:
        raise ValidationFailure(FUTURE_DATES)
    if query.start_date > query.end_date:
        raise ValidationFailure(REVERSED_RANGE)
