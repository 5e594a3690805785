"""
Tests for the dashboard session: filter changes, report table, form resets
and HTML rendering.
"""
import pytest
from datetime import date
from unittest.mock import Mock

from conftest import make_response
from fuel_dashboard.dashboard import Dashboard
from fuel_dashboard.loader import LoadStatus
from fuel_dashboard.models import FilterKind
from fuel_dashboard.mutations import RewardState

DIESEL_ROW = {"fuel_type": "Diesel", "total_quantity": 50, "total_revenue": 12500}
BY_TYPE = [{"fuel_type": "Petrol", "total_quantity": 120}, {"fuel_type": "Diesel", "total_quantity": 80}]
OVER_TIME = [{"date": "2024-06-01", "total_sales": 1000}, {"date": "2024-06-02", "total_sales": 1500}]


@pytest.fixture
def confirm():
    return Mock(return_value=True)


@pytest.fixture
def dash(config, client, confirm, today):
    return Dashboard(config, client=client, confirm=confirm, today=today)


def serve_charts(backend, by_type=BY_TYPE, over_time=OVER_TIME):
    backend.on("GET", "/api/sales_by_type", make_response(200, by_type))
    backend.on("GET", "/api/sales_over_time", make_response(200, over_time))


class TestReports:

    def test_report_table_scenario(self, dash, backend):
        backend.on("GET", "/api/reports", make_response(200, [DIESEL_ROW]))
        result = dash.generate_report()
        assert result.is_ready
        assert dash.report_table() == [
            "Fuel Type | Total Quantity | Total Revenue (₦)",
            "Diesel | 50 | 12500.00",
        ]

    def test_report_table_empty_when_not_ready(self, dash, backend):
        backend.on("GET", "/api/reports", make_response(200, []))
        assert dash.generate_report().status is LoadStatus.EMPTY
        assert dash.report_table() == []

    def test_set_filter_refreshes_both_charts(self, dash, backend):
        serve_charts(backend)
        results = dash.set_filter("custom", date(2024, 6, 1), date(2024, 6, 2))

        assert set(results) == {"sales_by_type", "sales_over_time"}
        assert all(r.is_ready for r in results.values())
        expected = {"filter": "custom", "start_date": "2024-06-01", "end_date": "2024-06-02"}
        assert backend.calls_to("GET", "/api/sales_by_type")[0][2] == expected
        assert backend.calls_to("GET", "/api/sales_over_time")[0][2] == expected

    def test_every_filter_change_fetches_again(self, dash, backend):
        serve_charts(backend)
        dash.set_filter(FilterKind.ALLTIME)
        dash.set_filter(FilterKind.ALLTIME)
        assert len(backend.calls_to("GET", "/api/sales_by_type")) == 2

    def test_invalid_filter_skips_network(self, dash, backend):
        results = dash.set_filter("custom", date(2024, 6, 1))
        assert all(r.error_message == "Please select both start and end dates" for r in results.values())
        assert backend.calls == []

    def test_chart_error_leaves_other_chart_usable(self, dash, backend):
        backend.on("GET", "/api/sales_by_type", make_response(200, {"error": "No sales recorded"}))
        backend.on("GET", "/api/sales_over_time", make_response(200, OVER_TIME))
        results = dash.refresh_charts()
        assert results["sales_by_type"].error_message == "No sales recorded"
        assert results["sales_over_time"].is_ready

    def test_filter_label(self, dash):
        assert dash.filter_label() == "All time"
        dash.query = dash.query.model_copy(
            update={"filter": FilterKind.CUSTOM, "start_date": date(2024, 6, 1), "end_date": None}
        )
        assert dash.filter_label() == "Custom range 2024-06-01 to ?"


class TestForms:

    def test_log_sale_resets_form(self, dash, backend):
        backend.on("POST", "/api/sales", make_response(201, {"message": "Sale recorded"}))
        dash.sale_form.fuel_type = "Petrol"
        dash.sale_form.quantity = "20"
        dash.sale_form.price = "617"
        dash.sale_form.date = "2024-06-01"

        result = dash.log_sale()

        assert result.ok
        assert dash.sale_form.fuel_type == ""
        assert dash.sale_form.quantity == ""

    def test_failed_sale_keeps_form(self, dash, backend):
        backend.on("POST", "/api/sales", make_response(500))
        dash.sale_form.fuel_type = "Petrol"
        dash.sale_form.quantity = "20"
        dash.sale_form.price = "617"
        dash.sale_form.date = "2024-06-01"
        assert dash.log_sale().message == "Failed to log sale"
        assert dash.sale_form.quantity == "20"

    def test_sale_validation_sends_nothing(self, dash, backend):
        result = dash.log_sale()
        assert result.message == "Please select a fuel type."
        assert backend.calls == []

    @pytest.mark.parametrize("field", ["quantity", "price"])
    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_non_finite_sale_numbers_rejected_locally(self, dash, backend, field, value):
        dash.sale_form.fuel_type = "Diesel"
        dash.sale_form.quantity = "50"
        dash.sale_form.price = "250"
        dash.sale_form.date = "2024-06-01"
        setattr(dash.sale_form, field, value)

        result = dash.log_sale()

        assert not result.ok
        assert result.message.startswith("Please enter a")
        assert getattr(dash.sale_form, field) == value
        assert backend.calls == []

    def test_add_customer_full_reset(self, dash, backend):
        backend.on("POST", "/api/customers", make_response(201, {"message": "ok"}))
        dash.customer_form.name = "Jane"
        dash.customer_form.points = "10"
        assert dash.add_customer().ok
        assert (dash.customer_form.name, dash.customer_form.points) == ("", "")

    def test_add_customer_needs_name(self, dash, backend):
        assert dash.add_customer().message == "Please enter customer name"
        assert backend.calls == []

    def test_reward_with_recovery(self, dash, backend, confirm):
        backend.on("POST", "/api/reward", make_response(404, {"error": "Customer not found"}),
                   make_response(200, {"message": "ok"}))
        backend.on("POST", "/api/customers", make_response(201, {"message": "ok"}))
        dash.customer_form.name = "Jane"
        dash.customer_form.points = "10"

        result = dash.reward_customer()

        assert result.ok
        confirm.assert_called_once()
        assert dash.reward_flow.state is RewardState.IDLE
        assert dash.customer_form.name == ""

    def test_default_confirm_declines(self, config, client, backend, today):
        backend.on("POST", "/api/reward", make_response(404, {"error": "Customer not found"}))
        dash = Dashboard(config, client=client, today=today)
        dash.customer_form.name = "Jane"
        dash.customer_form.points = "10"
        result = dash.reward_customer()
        assert result.message == "Customer not found"
        assert dash.customer_form.name == "Jane"
        assert len(backend.calls) == 1


class TestRendering:

    def test_render_ready_dashboard(self, dash, backend):
        serve_charts(backend)
        backend.on("GET", "/api/reports", make_response(200, [DIESEL_ROW]))
        dash.set_filter("alltime")
        dash.generate_report()

        html = dash.render_html()

        assert "<td>Diesel</td>" in html
        assert "12500.00" in html
        assert "Total Revenue (₦)" in html
        assert "Sales by Fuel Type" in html
        assert "Sales Over Time" in html
        assert "All time" in html

    def test_render_errors_and_empty(self, dash, backend):
        backend.on("GET", "/api/sales_by_type", make_response(200, []))
        backend.on("GET", "/api/sales_over_time", make_response(200, {"error": "Invalid date range"}))
        backend.on("GET", "/api/reports", make_response(503))
        dash.refresh_charts()
        dash.generate_report()

        html = dash.render_html()

        assert "No data available for selected period" in html
        assert '<p class="error">Invalid date range</p>' in html
        assert "Request failed with status 503 (Service Unavailable)" in html
        assert "<table>" not in html

    def test_render_escapes_backend_text(self, dash, backend):
        backend.on("GET", "/api/reports", make_response(200, {"error": "<script>x</script>"}))
        dash.generate_report()
        html = dash.render_html()
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html

    def test_context_manager_closes_client(self, config, today):
        client = Mock()
        with Dashboard(config, client=client, today=today):
            pass
        client.close.assert_called_once()
