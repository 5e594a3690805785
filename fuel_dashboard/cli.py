"""
Command line front end for the Fuel Dashboard.

Usage:
    # Log a sale
    fuel-dashboard sale --fuel-type Diesel --quantity 50 --price 250 --date 2024-04-01

    # Loyalty program
    fuel-dashboard customer "Jane Doe"
    fuel-dashboard reward "Jane Doe" 10          # asks before adding an unknown customer
    fuel-dashboard reward "Jane Doe" 10 --yes    # adds unknown customers without asking

    # Reports (all time, or a custom range)
    fuel-dashboard report
    fuel-dashboard report --from 2024-04-01 --to 2024-04-30

    # Chart data and the rendered HTML dashboard
    fuel-dashboard charts --from 2024-04-01 --to 2024-04-30
    fuel-dashboard render -o dashboard.html
"""
from __future__ import annotations
import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Optional
from loguru import logger

from .config import DashboardConfig
from .dashboard import CHART_TITLES, Dashboard
from .loader import LoadResult, LoadStatus
from .models import FilterKind, ReportQuery
from .mutations import MutationResult


def configure_logging(config: DashboardConfig, verbose: bool = False, quiet: bool = False):
    logger.remove()
    if quiet:
        level = "ERROR"
    elif verbose:
        level = "DEBUG"
    else:
        level = config.log_level.upper()
    logger.add(sys.stderr, level=level)
    if config.log_file:
        logger.add(config.log_file, level="DEBUG", rotation="10 MB")


def confirm_on_terminal(message: str) -> bool:
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _apply_range(dash: Dashboard, args) -> None:
    """Select the filter from --from/--to without triggering chart loads."""
    if args.from_date or args.to_date:
        dash.query = ReportQuery(
            filter=FilterKind.CUSTOM, start_date=args.from_date, end_date=args.to_date
        )
    else:
        dash.query = ReportQuery(filter=FilterKind.ALLTIME)


def _print_mutation(result: MutationResult) -> int:
    if result.ok:
        print(f"✓ {result.message}")
        return 0
    print(f"✗ {result.message}")
    return 1


def _print_load_failure(result: LoadResult) -> int:
    # Empty results are not failures
    if result.status is LoadStatus.EMPTY:
        print(result.message)
        return 0
    print(f"✗ {result.message}")
    return 1


def cmd_sale(dash: Dashboard, args) -> int:
    form = dash.sale_form
    form.fuel_type = args.fuel_type or ""
    form.quantity = args.quantity or ""
    form.price = args.price or ""
    form.date = args.date or date.today().isoformat()
    return _print_mutation(dash.log_sale())


def cmd_customer(dash: Dashboard, args) -> int:
    dash.customer_form.name = args.name
    return _print_mutation(dash.add_customer())


def cmd_reward(dash: Dashboard, args) -> int:
    dash.customer_form.name = args.name
    dash.customer_form.points = args.points
    if args.yes:
        dash.reward_flow.confirm = lambda message: True
    result = dash.reward_customer()
    if result.ok and dash.reward_flow.recovered:
        print(f"✓ Added customer {args.name!r}")
    return _print_mutation(result)


def cmd_report(dash: Dashboard, args) -> int:
    _apply_range(dash, args)
    result = dash.generate_report()
    if not result.is_ready:
        return _print_load_failure(result)
    print(f"Report: {dash.filter_label()}")
    for line in dash.report_table():
        print(f"  {line}")
    return 0


def cmd_charts(dash: Dashboard, args) -> int:
    _apply_range(dash, args)
    results = dash.refresh_charts()
    code = 0
    for name, result in results.items():
        print(f"\n{CHART_TITLES[name]}:")
        if not result.is_ready:
            code = max(code, _print_load_failure(result))
            continue
        series = result.data
        for label, value in zip(series.labels, series.values):
            print(f"  {label}: {value:,.2f}")
    return code


def cmd_render(dash: Dashboard, args) -> int:
    _apply_range(dash, args)
    dash.refresh_charts()
    dash.generate_report()
    output = Path(args.output or dash.config.output_path)
    output.write_text(dash.render_html(), encoding="utf-8")
    print(f"✓ Dashboard written to {output}")
    return 0


COMMANDS = {
    "sale": cmd_sale,
    "customer": cmd_customer,
    "reward": cmd_reward,
    "report": cmd_report,
    "charts": cmd_charts,
    "render": cmd_render,
}


def _add_range_args(p: argparse.ArgumentParser):
    p.add_argument(
        "--from",
        dest="from_date",
        type=lambda s: date.fromisoformat(s),
        help="Start of a custom date range (YYYY-MM-DD)",
    )
    p.add_argument(
        "--to",
        dest="to_date",
        type=lambda s: date.fromisoformat(s),
        help="End of a custom date range (YYYY-MM-DD)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fuel-dashboard",
        description="Fuel sales, loyalty and reporting dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output except errors")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("sale", help="Log a fuel sale")
    p.add_argument("--fuel-type", help="Petrol, Diesel or Kerosine")
    p.add_argument("--quantity", help="Quantity sold")
    p.add_argument("--price", help="Sale price")
    p.add_argument("--date", help="Sale date (YYYY-MM-DD, default: today)")

    p = sub.add_parser("customer", help="Add a loyalty customer")
    p.add_argument("name", help="Customer name")

    p = sub.add_parser("reward", help="Reward loyalty points to a customer")
    p.add_argument("name", help="Customer name")
    p.add_argument("points", help="Points to add")
    p.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Add the customer without asking if they do not exist",
    )

    p = sub.add_parser("report", help="Show quantity and revenue per fuel type")
    _add_range_args(p)

    p = sub.add_parser("charts", help="Show chart data (sales by type, sales over time)")
    _add_range_args(p)

    p = sub.add_parser("render", help="Write the HTML dashboard")
    _add_range_args(p)
    p.add_argument("-o", "--output", help="Output file (default: FUEL_DASHBOARD_OUTPUT)")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = DashboardConfig.from_env()
    configure_logging(config, verbose=args.verbose, quiet=args.quiet)

    errors = config.validate()
    if errors:
        for err in errors:
            logger.error(f"Configuration error: {err}")
        return 1

    try:
        with Dashboard(config, confirm=confirm_on_terminal) as dash:
            return COMMANDS[args.command](dash, args)
    except KeyboardInterrupt:
        print("\n\nCancelled by user")
        return 130
    except OSError as e:
        logger.error(f"Could not write output: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
