"""
Debugging and diagnostic utilities for the Fuel Dashboard.

Provides tools for:
- Testing backend connectivity
- Inspecting raw JSON responses
- Checking that a resource's rows parse into its projection
"""
from __future__ import annotations
import json
import sys
from datetime import date
from pathlib import Path
from typing import Optional
from loguru import logger

from .client import FuelApiClient, FuelApiConnectionError, FuelApiError
from .config import DashboardConfig
from .loader import RESOURCES, RemoteDataLoader
from .models import FilterKind, ReportQuery


class DashboardDebugger:
    """
    Usage:
        debugger = DashboardDebugger()

        # Test connection
        debugger.test_connection()

        # Fetch and display raw JSON
        debugger.fetch_raw("sales_by_type")

        # Run a resource through the loader and show the outcome
        debugger.validate_resource("reports")
    """

    def __init__(self, config: Optional[DashboardConfig] = None):
        self.config = config or DashboardConfig.from_env()
        self.client = FuelApiClient(self.config)

    def close(self):
        self.client.close()

    def test_connection(self, verbose: bool = True) -> dict:
        result = self.client.test_connection()
        if verbose:
            print("\n=== Backend Connection Test ===")
            print(f"Status: {result['status']}")
            print(f"URL: {result.get('url', 'N/A')}")
            if result.get("rows") is not None:
                print(f"Report rows (all time): {result['rows']}")
            if result.get("error"):
                print(f"Error: {result['error']}")
        return result

    def fetch_raw(
        self,
        resource: str,
        query: Optional[ReportQuery] = None,
        save_to_file: Optional[str] = None,
    ):
        if resource not in RESOURCES:
            raise ValueError(f"Unknown resource: {resource}. Valid: {list(RESOURCES.keys())}")
        query = query or ReportQuery()
        payload = self.client.get_json(RESOURCES[resource].path, query.to_params())
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        if save_to_file:
            Path(save_to_file).write_text(text, encoding="utf-8")
            print(f"Saved {len(text)} bytes to {save_to_file}")
        else:
            print(text)
        return payload

    def validate_resource(self, resource: str, query: Optional[ReportQuery] = None):
        result = RemoteDataLoader(self.client, resource).load(query or ReportQuery())
        print(f"\n=== {resource} ===")
        print(f"Status: {result.status.value}")
        if result.message:
            print(f"Message: {result.message}")
        if result.is_ready:
            data = result.data
            rows = data if isinstance(data, list) else list(zip(data.labels, data.values))
            print(f"Rows: {len(rows)}")
            for row in rows[:5]:
                print(f"  {row}")
        return result


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Fuel Dashboard - Debug Utilities")
    subparsers = parser.add_subparsers(dest="command", help="Debug command")

    subparsers.add_parser("test-connection", help="Test backend connection")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch raw JSON for a resource")
    fetch_parser.add_argument("resource", choices=list(RESOURCES.keys()))
    fetch_parser.add_argument("--save", "-o", help="Save to file")
    fetch_parser.add_argument("--from-date", type=lambda s: date.fromisoformat(s))
    fetch_parser.add_argument("--to-date", type=lambda s: date.fromisoformat(s))

    validate_parser = subparsers.add_parser("validate", help="Load a resource and show the outcome")
    validate_parser.add_argument("resource", choices=list(RESOURCES.keys()))
    validate_parser.add_argument("--from-date", type=lambda s: date.fromisoformat(s))
    validate_parser.add_argument("--to-date", type=lambda s: date.fromisoformat(s))

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    query = ReportQuery()
    if getattr(args, "from_date", None) or getattr(args, "to_date", None):
        query = ReportQuery(
            filter=FilterKind.CUSTOM, start_date=args.from_date, end_date=args.to_date
        )

    debugger = DashboardDebugger()
    try:
        if args.command == "test-connection":
            result = debugger.test_connection()
            sys.exit(0 if result["status"] == "connected" else 1)
        elif args.command == "fetch":
            debugger.fetch_raw(args.resource, query, save_to_file=args.save)
        elif args.command == "validate":
            debugger.validate_resource(args.resource, query)
    except FuelApiConnectionError as e:
        logger.error(f"Connection error: {e}")
        sys.exit(1)
    except FuelApiError as e:
        logger.error(f"Backend error: {e}")
        sys.exit(1)
    finally:
        debugger.close()


if __name__ == "__main__":
    main()
