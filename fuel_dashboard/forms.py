"""
Form state for the write operations.

Forms hold what the user typed, as strings, and convert it into validated
models. Conversion raises ValidationFailure with the message shown to the
user; nothing is sent to the backend until a form converts cleanly.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, fields
from pydantic import ValidationError
from .models import Customer, FuelType, Sale
from .parsers import parse_api_date, parse_float, parse_int
from .validators import ValidationFailure

SELECT_FUEL_TYPE = "Please select a fuel type."
ENTER_CUSTOMER_NAME = "Please enter customer name"
NAME_AND_POINTS = "Please provide both customer name and points."


class _Form:
    def reset(self) -> None:
        """Clear every field."""
        for f in fields(self):
            setattr(self, f.name, "")


@dataclass
class SaleForm(_Form):
    fuel_type: str = ""
    quantity: str = ""
    price: str = ""
    date: str = ""

    def to_sale(self) -> Sale:
        if not self.fuel_type:
            raise ValidationFailure(SELECT_FUEL_TYPE)
        try:
            fuel_type = FuelType(self.fuel_type.strip().capitalize())
        except ValueError:
            valid = ", ".join(t.value for t in FuelType)
            raise ValidationFailure(f"Unknown fuel type {self.fuel_type!r}. Choose one of: {valid}.")

        quantity = parse_float(self.quantity)
        if quantity is None or not math.isfinite(quantity) or quantity <= 0:
            raise ValidationFailure("Please enter a quantity greater than zero.")
        price = parse_float(self.price)
        if price is None or not math.isfinite(price) or price < 0:
            raise ValidationFailure("Please enter a valid price.")
        sale_date = parse_api_date(self.date)
        if sale_date is None:
            raise ValidationFailure("Please enter the sale date (YYYY-MM-DD).")

        try:
            return Sale(fuel_type=fuel_type, quantity=quantity, price=price, date=sale_date)
        except ValidationError as e:
            raise ValidationFailure(f"Invalid sale: {e.errors()[0]['msg']}") from e


@dataclass
class CustomerForm(_Form):
    name: str = ""
    points: str = ""

    def to_new_customer(self) -> Customer:
        name = self.name.strip()
        if not name:
            raise ValidationFailure(ENTER_CUSTOMER_NAME)
        return Customer(name=name)

    def to_reward(self) -> Customer:
        name = self.name.strip()
        if not name or not str(self.points).strip():
            raise ValidationFailure(NAME_AND_POINTS)
        points = parse_int(self.points)
        if points is None or points <= 0:
            raise ValidationFailure("Points must be a positive whole number.")
        return Customer(name=name, points=points)
