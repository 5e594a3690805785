"""
Base utilities for parsing backend payloads and user input.

Provides common functions for:
- Date parsing
- Numeric parsing
- Display formatting for quantities and money
"""
from __future__ import annotations
import re
from datetime import datetime, date
from typing import Any, Optional
from loguru import logger


class PayloadError(ValueError):
    """Raised when a backend payload does not have the expected shape."""
    pass


def parse_api_date(s: Any) -> Optional[date]:
    """
    Parse a date string to a Python date.

    Accepts:
    - YYYY-MM-DD (what the backend and date inputs produce)
    - YYYY-MM-DDTHH:MM:SS (ISO timestamps; the time part is dropped)
    - DD/MM/YYYY

    Returns None for empty or unparseable strings.
    """
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    if not s:
        return None

    s = str(s).strip()
    if not s or s.lower() in ("null", "none"):
        return None

    formats = [
        "%Y-%m-%d",
        "%Y-%m-%dT%H:%M:%S",
        "%d/%m/%Y",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(s[:19], fmt).date()
        except ValueError:
            continue

    logger.warning(f"Could not parse date: {s}")
    return None


def parse_float(s: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Parse a user-entered number to float.

    Handles thousands separators, surrounding whitespace and a leading
    currency symbol. Returns ``default`` when the value is empty or not a number.
    """
    if s is None or isinstance(s, bool):
        return default
    if isinstance(s, (int, float)):
        return float(s)

    s = re.sub(r"[,₦$€£\s]", "", str(s))
    if not s:
        return default
    try:
        return float(s)
    except ValueError:
        return default


def parse_int(s: Any, default: Optional[int] = None) -> Optional[int]:
    """Parse a whole number; "10.0" is accepted, "10.5" is not."""
    val = parse_float(s)
    if val is None or not val.is_integer():
        return default
    return int(val)


def format_quantity(value: float) -> str:
    """Whole quantities print without decimals, fractional ones keep up to 3 places."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def format_money(value: float, symbol: str = "") -> str:
    return f"{symbol}{value:.2f}"
