"""
Remote data loader for report-shaped resources.

One parameterized loader serves the report table and both charts. A load:

1. validates the query locally (no request on failure)
2. issues exactly one GET for the resource
3. classifies the outcome into a LoadResult (error / empty / ready)
4. commits the result as the loader's state unless a newer load was started
   meanwhile (last request wins)
"""
from __future__ import annotations
import itertools
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional
from loguru import logger

from .client import (
    UNEXPECTED_RESPONSE,
    FuelApiClient,
    FuelApiConnectionError,
    FuelApiResponseError,
    embedded_error,
)
from .models import ReportQuery
from .parsers import PayloadError, parse_report_rows, parse_sales_by_type, parse_sales_over_time
from .validators import ValidationFailure, validate_query

NO_DATA = "No data available for selected period"


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


@dataclass(frozen=True)
class LoadResult:
    status: LoadStatus
    error_message: Optional[str] = None
    data: Any = None
    request_id: int = 0

    @property
    def is_ready(self) -> bool:
        return self.status is LoadStatus.READY

    @property
    def message(self) -> Optional[str]:
        """Text to show in place of data (error or empty notice)."""
        return self.error_message


@dataclass(frozen=True)
class Resource:
    name: str
    path: str
    parser: Callable[[Any], Any]


RESOURCES = {
    "reports": Resource("reports", "/api/reports", parse_report_rows),
    "sales_by_type": Resource("sales_by_type", "/api/sales_by_type", parse_sales_by_type),
    "sales_over_time": Resource("sales_over_time", "/api/sales_over_time", parse_sales_over_time),
}


class RemoteDataLoader:
    """
    Fetches one collection resource and reduces it to a LoadResult.

    Usage:
        loader = RemoteDataLoader(client, "sales_by_type")
        result = loader.load(ReportQuery(filter="alltime"))
        if result.is_ready:
            render(result.data)

    ``state`` always holds the result of the most recently *started* load, so
    a slow earlier response can never overwrite a later one.
    """

    def __init__(
        self,
        client: FuelApiClient,
        resource: str | Resource,
        today: Optional[Callable[[], date]] = None,
    ):
        if isinstance(resource, str):
            if resource not in RESOURCES:
                raise ValueError(f"Unknown resource: {resource}. Valid: {list(RESOURCES.keys())}")
            resource = RESOURCES[resource]
        self.client = client
        self.resource = resource
        self._today = today or date.today
        self._ids = itertools.count(1)
        self._latest_id = 0
        self._lock = threading.Lock()
        self._state = LoadResult(LoadStatus.IDLE)

    @property
    def state(self) -> LoadResult:
        return self._state

    @property
    def latest_request_id(self) -> int:
        return self._latest_id

    def load(self, query: ReportQuery) -> LoadResult:
        """
        Run one load for ``query`` and return its result.

        The result is returned even when it is stale; it is only committed to
        ``state`` if no newer load was issued while this one was in flight.
        """
        with self._lock:
            request_id = next(self._ids)
            self._latest_id = request_id

        try:
            validate_query(query, today=self._today())
        except ValidationFailure as e:
            logger.info(f"{self.resource.name}: rejected query ({e.message})")
            return self._commit(LoadResult(LoadStatus.ERROR, e.message, request_id=request_id))

        self._commit(LoadResult(LoadStatus.LOADING, request_id=request_id))
        result = self._fetch(query, request_id)
        return self._commit(result)

    def submit(self, query: ReportQuery, executor: Executor) -> Future:
        """Run ``load`` on an executor; the stale-response guard still applies."""
        return executor.submit(self.load, query)

    def _fetch(self, query: ReportQuery, request_id: int) -> LoadResult:
        name = self.resource.name
        try:
            payload = self.client.get_json(self.resource.path, query.to_params())
        except (FuelApiConnectionError, FuelApiResponseError) as e:
            return LoadResult(LoadStatus.ERROR, str(e), request_id=request_id)

        error = embedded_error(payload)
        if error:
            logger.info(f"{name}: backend reported: {error}")
            return LoadResult(LoadStatus.ERROR, error, request_id=request_id)

        if isinstance(payload, list) and not payload:
            logger.info(f"{name}: no rows for {query.to_params()}")
            return LoadResult(LoadStatus.EMPTY, NO_DATA, request_id=request_id)

        try:
            data = self.resource.parser(payload)
        except PayloadError as e:
            logger.warning(f"{name}: {e}")
            return LoadResult(LoadStatus.ERROR, UNEXPECTED_RESPONSE, request_id=request_id)

        logger.debug(f"{name}: loaded {len(payload)} rows")
        return LoadResult(LoadStatus.READY, data=data, request_id=request_id)

    def _commit(self, result: LoadResult) -> LoadResult:
        with self._lock:
            if result.request_id == self._latest_id:
                self._state = result
            else:
                logger.debug(
                    f"{self.resource.name}: discarding stale result #{result.request_id} "
                    f"(latest is #{self._latest_id})"
                )
        return result
