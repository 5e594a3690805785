"""
Dashboard session: the state one staff member works with.

Owns the form state, the active report filter and one loader per
report-shaped resource, and exposes one method per user action. Every
filter change refreshes both charts; each refresh fully replaces what the
charts showed before.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Callable, Optional
from jinja2 import Template
from loguru import logger

from .charts import build_figure, figure_html, register_plotting
from .client import FuelApiClient
from .config import DashboardConfig
from .forms import CustomerForm, SaleForm
from .loader import LoadResult, LoadStatus, RemoteDataLoader
from .models import FilterKind, ReportQuery
from . import mutations
from .mutations import MutationResult, RewardFlow
from .parsers import format_money, format_quantity
from .templates import load_template
from .validators import ValidationFailure

CHART_RESOURCES = ("sales_by_type", "sales_over_time")
CHART_TITLES = {
    "sales_by_type": "Sales by Fuel Type",
    "sales_over_time": "Sales Over Time",
}


class Dashboard:
    """
    Usage:
        with Dashboard(confirm=ask_user) as dash:
            dash.sale_form.fuel_type = "Diesel"
            ...
            result = dash.log_sale()

            dash.set_filter("custom", date(2024, 4, 1), date(2024, 4, 30))
            dash.generate_report()
            html = dash.render_html()
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        client: Optional[FuelApiClient] = None,
        confirm: Optional[Callable[[str], bool]] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.config = config or DashboardConfig.from_env()
        self.client = client or FuelApiClient(self.config)
        self.sale_form = SaleForm()
        self.customer_form = CustomerForm()
        self.query = ReportQuery()
        self.reward_flow = RewardFlow(self.client, confirm or (lambda message: False))

        self.report_loader = RemoteDataLoader(self.client, "reports", today=today)
        self.chart_loaders = {
            name: RemoteDataLoader(self.client, name, today=today) for name in CHART_RESOURCES
        }
        register_plotting()

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # Reports & charts

    def set_filter(
        self,
        kind: FilterKind | str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[str, LoadResult]:
        """Change the reporting window and refresh both charts for it."""
        self.query = ReportQuery(filter=kind, start_date=start_date, end_date=end_date)
        logger.info(f"Filter set to {self.query.to_params()}")
        return self.refresh_charts()

    def refresh_charts(self) -> dict[str, LoadResult]:
        """Load both chart resources concurrently for the current filter."""
        query = self.query
        with ThreadPoolExecutor(max_workers=len(self.chart_loaders)) as pool:
            futures = {
                name: loader.submit(query, pool) for name, loader in self.chart_loaders.items()
            }
            return {name: future.result() for name, future in futures.items()}

    def generate_report(self) -> LoadResult:
        return self.report_loader.load(self.query)

    def report_table(self) -> list[str]:
        """
        Report as text lines: a header, then one line per fuel type.

        Revenue is printed with two decimals; the currency symbol appears in
        the header only.
        """
        state = self.report_loader.state
        if not state.is_ready:
            return []
        header = f"Fuel Type | Total Quantity | Total Revenue ({self.config.currency_symbol})"
        return [header] + [
            f"{row.fuel_type} | {format_quantity(row.total_quantity)} | {format_money(row.total_revenue)}"
            for row in state.data
        ]

    # Sales & loyalty

    def log_sale(self) -> MutationResult:
        try:
            sale = self.sale_form.to_sale()
        except ValidationFailure as e:
            return MutationResult(False, e.message)
        result = mutations.log_sale(self.client, sale)
        if result.ok:
            self.sale_form.reset()
        return result

    def add_customer(self) -> MutationResult:
        try:
            customer = self.customer_form.to_new_customer()
        except ValidationFailure as e:
            return MutationResult(False, e.message)
        result = mutations.add_customer(self.client, customer)
        if result.ok:
            self.customer_form.reset()
        return result

    def reward_customer(self) -> MutationResult:
        result = self.reward_flow.run(self.customer_form.to_reward)
        if result.ok:
            self.customer_form.reset()
        return result

    # Rendering

    def filter_label(self) -> str:
        q = self.query
        if q.filter is FilterKind.CUSTOM:
            start = q.start_date.isoformat() if q.start_date else "?"
            end = q.end_date.isoformat() if q.end_date else "?"
            return f"Custom range {start} to {end}"
        return "All time"

    def _chart_context(self, name: str) -> dict:
        state = self.chart_loaders[name].state
        html = None
        if state.is_ready:
            html = figure_html(build_figure(state.data), include_plotlyjs=self.config.plotlyjs)
        return {
            "title": CHART_TITLES[name],
            "html": html,
            "error": state.status is LoadStatus.ERROR,
            "message": state.message,
        }

    def _report_context(self) -> dict:
        state = self.report_loader.state
        rows = []
        if state.is_ready:
            rows = [
                {
                    "fuel_type": row.fuel_type,
                    "quantity": format_quantity(row.total_quantity),
                    "revenue": format_money(row.total_revenue),
                }
                for row in state.data
            ]
        return {
            "rows": rows,
            "error": state.status is LoadStatus.ERROR,
            "message": state.message,
        }

    def render_html(self, title: str = "Fuel Management Dashboard") -> str:
        template = Template(load_template("dashboard"), autoescape=True)
        return template.render(
            title=title,
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
            api_url=self.client.base_url,
            filter_label=self.filter_label(),
            currency_symbol=self.config.currency_symbol,
            charts=[self._chart_context(name) for name in CHART_RESOURCES],
            report=self._report_context(),
        )
