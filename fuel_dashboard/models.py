from __future__ import annotations
import datetime as dt
from enum import Enum
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


class FilterKind(str, Enum):
    ALLTIME = "alltime"
    CUSTOM = "custom"


class FuelType(str, Enum):
    PETROL = "Petrol"
    DIESEL = "Diesel"
    KEROSINE = "Kerosine"


class ReportQuery(BaseModel):
    """Reporting window shared by the report table and both charts."""
    model_config = ConfigDict(frozen=True)

    filter: FilterKind = FilterKind.ALLTIME
    start_date: dt.date | None = None
    end_date: dt.date | None = None

    def to_params(self) -> dict[str, str]:
        """Query-string parameters; dates are only sent for a custom range."""
        params = {"filter": self.filter.value}
        if self.filter is FilterKind.CUSTOM:
            if self.start_date:
                params["start_date"] = self.start_date.isoformat()
            if self.end_date:
                params["end_date"] = self.end_date.isoformat()
        return params


class Sale(BaseModel):
    fuel_type: FuelType
    quantity: float = Field(gt=0, allow_inf_nan=False)
    price: float = Field(ge=0, allow_inf_nan=False)
    date: dt.date

    def to_payload(self) -> dict:
        return {
            "fuel_type": self.fuel_type.value,
            "quantity": self.quantity,
            "price": self.price,
            "date": self.date.isoformat(),
        }


class Customer(BaseModel):
    name: str = Field(min_length=1)
    points: int | None = Field(default=None, gt=0)


class ReportRow(BaseModel):
    fuel_type: str
    total_quantity: float
    total_revenue: float


class SalesByTypeRow(BaseModel):
    fuel_type: str
    total_quantity: float


class SalesOverTimeRow(BaseModel):
    date: str                    # kept as the backend formats it, used as an axis label
    total_sales: float


class ChartSeries(BaseModel):
    """Chart-ready projection of one fetch. Never persisted."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["bar", "line"]
    title: str
    label: str
    labels: list[str]
    values: list[float]
