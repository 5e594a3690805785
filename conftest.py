"""
Shared pytest fixtures.

The backend is faked at the requests.Session level, so the real client,
loaders and mutations run unchanged.
"""
import json
from datetime import date
from unittest.mock import Mock
from urllib.parse import urlsplit

import pytest

from fuel_dashboard.client import FuelApiClient
from fuel_dashboard.config import DashboardConfig

TODAY = date(2024, 6, 30)


def make_response(status: int = 200, body=None, text: str | None = None):
    """Build a stand-in for requests.Response."""
    r = Mock()
    r.status_code = status
    r.ok = 200 <= status < 300
    if text is not None:
        r.content = text.encode("utf-8")
        r.json.side_effect = ValueError("Expecting value")
    elif body is None:
        r.content = b""
        r.json.side_effect = ValueError("Expecting value")
    else:
        r.content = json.dumps(body).encode("utf-8")
        r.json.return_value = body
    return r


class FakeBackend:
    """
    Routes session.request calls by (method, path).

    Each route holds a queue of responses (or exceptions to raise); the last
    one is repeated once the queue is down to a single entry.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method: str, path: str, *responses):
        self.routes[(method, path)] = list(responses)
        return self

    def __call__(self, method, url, **kwargs):
        path = urlsplit(url).path
        self.calls.append((method, path, kwargs.get("params") or kwargs.get("json")))
        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {path}")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def calls_to(self, method: str, path: str) -> list:
        return [c for c in self.calls if c[0] == method and c[1] == path]


@pytest.fixture
def config():
    return DashboardConfig(
        api_url="http://backend.test",
        request_timeout=5,
        currency_symbol="₦",
        plotlyjs="none",
        log_file=None,
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(config, backend):
    client = FuelApiClient(config)
    client.session = Mock()
    client.session.request.side_effect = backend
    return client


@pytest.fixture
def today():
    return lambda: TODAY


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires a running backend)"
    )
