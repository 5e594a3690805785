"""
Fuel Dashboard - sales, loyalty and reporting front end for a fuel station.

Talks to the station's REST backend to:
- Log fuel sales
- Add loyalty customers and reward points (with add-then-retry for unknown customers)
- Load the report table and the two sales charts for all time or a date range

Usage:
    # Command line
    python -m fuel_dashboard report --from 2024-04-01 --to 2024-04-30
    python -m fuel_dashboard render -o dashboard.html

    # Diagnostics
    python -m fuel_dashboard.debug test-connection
"""

__version__ = "1.0.0"

from .config import DashboardConfig
from .dashboard import Dashboard
from .loader import LoadResult, LoadStatus, RemoteDataLoader

__all__ = [
    "DashboardConfig",
    "Dashboard",
    "LoadResult",
    "LoadStatus",
    "RemoteDataLoader",
    "__version__",
]
