"""
HTTP client for the fuel backend REST API.

Wraps a requests.Session with JSON helpers and maps every failure onto a
small exception taxonomy:

- FuelApiConnectionError: the backend could not be reached (network, timeout)
- FuelApiResponseError: the backend answered with a non-2xx status or a body
  that is not JSON

A 2xx response is returned as decoded JSON even if it carries an ``error``
field; classifying domain errors is the caller's job. Requests are never
retried.
"""
from __future__ import annotations
from http import HTTPStatus
from typing import Any, Optional
import requests
from loguru import logger
from .config import DashboardConfig

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": "fuel-dashboard/1.0",
}

CONNECTION_FAILED = "Failed to connect to the server"
UNEXPECTED_RESPONSE = "Unexpected response from server"


class FuelApiError(Exception):
    """Base class for backend communication failures."""
    pass


class FuelApiConnectionError(FuelApiError):
    """Raised when the backend cannot be reached."""
    pass


class FuelApiResponseError(FuelApiError):
    """Raised when the backend returns a non-2xx status or an undecodable body."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


def describe_status(status_code: int) -> str:
    """Human readable message for an HTTP status with no error body."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Unknown Status"
    return f"Request failed with status {status_code} ({reason})"


def embedded_error(payload: Any) -> Optional[str]:
    """Return the backend's ``error`` field, if the payload carries one."""
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return None


class FuelApiClient:
    """
    JSON client for the fuel backend.

    Usage:
        with FuelApiClient(config) as client:
            rows = client.get_json("/api/reports", {"filter": "alltime"})
            client.post_json("/api/customers", {"name": "Jane"})
    """

    def __init__(self, config: Optional[DashboardConfig] = None):
        self.config = config or DashboardConfig.from_env()
        self.base_url = self.config.api_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """
        Issue a GET and return the decoded JSON body.

        Raises:
            FuelApiConnectionError: If the backend is unreachable
            FuelApiResponseError: On non-2xx status or non-JSON body
        """
        return self._request("GET", path, params=params)

    def post_json(self, path: str, payload: dict) -> Any:
        """
        Issue a POST with a JSON body and return the decoded JSON response.

        An empty 2xx body decodes to None.
        """
        return self._request("POST", path, json=payload)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.url_for(path)
        logger.debug(f"{method} {url} {kwargs.get('params') or ''}")
        try:
            r = self.session.request(
                method, url, timeout=self.config.request_timeout, **kwargs
            )
        except (requests.Timeout, requests.ConnectionError) as e:
            logger.error(f"Failed to connect to backend at {self.base_url}: {e}")
            raise FuelApiConnectionError(CONNECTION_FAILED) from e
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise FuelApiConnectionError(CONNECTION_FAILED) from e

        payload = self._decode(r)

        if not r.ok:
            server_message = embedded_error(payload)
            message = server_message or describe_status(r.status_code)
            logger.warning(f"{method} {url} -> {r.status_code}: {message}")
            raise FuelApiResponseError(
                message, status_code=r.status_code, server_message=server_message
            )

        if payload is _UNDECODABLE:
            logger.warning(f"{method} {url} -> {r.status_code} with a non-JSON body")
            raise FuelApiResponseError(UNEXPECTED_RESPONSE, status_code=r.status_code)

        logger.debug(f"{method} {url} -> {r.status_code}")
        return payload

    @staticmethod
    def _decode(r) -> Any:
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            return _UNDECODABLE

    def test_connection(self) -> dict:
        """
        Probe the backend with an all-time report request.

        Returns:
            Dict with connection status and basic response info
        """
        try:
            payload = self.get_json("/api/reports", {"filter": "alltime"})
        except FuelApiConnectionError as e:
            return {"status": "failed", "url": self.base_url, "error": str(e)}
        except FuelApiResponseError as e:
            return {
                "status": "connected_error",
                "url": self.base_url,
                "status_code": e.status_code,
                "error": str(e),
            }
        rows = len(payload) if isinstance(payload, list) else None
        return {"status": "connected", "url": self.base_url, "rows": rows}


# Sentinel for a body that is present but not JSON
_UNDECODABLE = object()
