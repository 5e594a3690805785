"""
Tests for the backend HTTP client.
"""
import pytest
import requests
from unittest.mock import Mock

from conftest import make_response
from fuel_dashboard.client import (
    CONNECTION_FAILED,
    FuelApiClient,
    FuelApiConnectionError,
    FuelApiResponseError,
    describe_status,
    embedded_error,
)
from fuel_dashboard.config import DashboardConfig


@pytest.fixture
def api(config):
    client = FuelApiClient(config)
    client.session = Mock()
    return client


class TestRequests:
    """Tests for how requests are issued."""

    def test_get_sends_params_and_timeout(self, api):
        api.session.request.return_value = make_response(200, [])
        api.get_json("/api/reports", {"filter": "alltime"})
        api.session.request.assert_called_once_with(
            "GET", "http://backend.test/api/reports", timeout=5, params={"filter": "alltime"}
        )

    def test_post_sends_json_body(self, api):
        api.session.request.return_value = make_response(201, {"message": "ok"})
        body = api.post_json("/api/customers", {"name": "Jane"})
        assert body == {"message": "ok"}
        api.session.request.assert_called_once_with(
            "POST", "http://backend.test/api/customers", timeout=5, json={"name": "Jane"}
        )

    def test_trailing_slash_in_base_url(self):
        client = FuelApiClient(DashboardConfig(api_url="http://backend.test/"))
        assert client.url_for("/api/sales") == "http://backend.test/api/sales"
        assert client.url_for("api/sales") == "http://backend.test/api/sales"

    def test_json_headers(self, config):
        client = FuelApiClient(config)
        assert client.session.headers["Content-Type"] == "application/json"


class TestResponses:
    """Tests for response classification in the client."""

    def test_2xx_with_error_field_is_returned(self, api):
        api.session.request.return_value = make_response(200, {"error": "No sales found"})
        assert api.get_json("/api/reports") == {"error": "No sales found"}

    def test_empty_2xx_body_is_none(self, api):
        api.session.request.return_value = make_response(204)
        assert api.post_json("/api/sales", {}) is None

    def test_non_2xx_uses_server_message(self, api):
        api.session.request.return_value = make_response(404, {"error": "Customer not found"})
        with pytest.raises(FuelApiResponseError) as exc:
            api.post_json("/api/reward", {"name": "Jane", "points": 10})
        assert str(exc.value) == "Customer not found"
        assert exc.value.status_code == 404
        assert exc.value.server_message == "Customer not found"

    def test_non_2xx_without_body_uses_status(self, api):
        api.session.request.return_value = make_response(500, text="<html>oops</html>")
        with pytest.raises(FuelApiResponseError) as exc:
            api.get_json("/api/reports")
        assert str(exc.value) == "Request failed with status 500 (Internal Server Error)"
        assert exc.value.server_message is None

    def test_2xx_non_json_body(self, api):
        api.session.request.return_value = make_response(200, text="not json")
        with pytest.raises(FuelApiResponseError, match="Unexpected response"):
            api.get_json("/api/reports")

    @pytest.mark.parametrize(
        "exc",
        [requests.ConnectionError("refused"), requests.Timeout("slow"), requests.RequestException("bad")],
    )
    def test_transport_failures(self, api, exc):
        api.session.request.side_effect = exc
        with pytest.raises(FuelApiConnectionError) as raised:
            api.get_json("/api/reports")
        assert str(raised.value) == CONNECTION_FAILED


class TestHelpers:
    def test_describe_unknown_status(self):
        assert describe_status(599) == "Request failed with status 599 (Unknown Status)"

    def test_embedded_error(self):
        assert embedded_error({"error": "Invalid date range"}) == "Invalid date range"
        assert embedded_error({"error": ""}) is None
        assert embedded_error([{"error": "x"}]) is None
        assert embedded_error(None) is None


class TestConnection:
    def test_connected(self, api):
        api.session.request.return_value = make_response(200, [{"fuel_type": "Diesel"}])
        assert api.test_connection() == {"status": "connected", "url": "http://backend.test", "rows": 1}

    def test_unreachable(self, api):
        api.session.request.side_effect = requests.ConnectionError("refused")
        assert api.test_connection()["status"] == "failed"

    def test_server_error(self, api):
        api.session.request.return_value = make_response(503)
        result = api.test_connection()
        assert result["status"] == "connected_error"
        assert result["status_code"] == 503
