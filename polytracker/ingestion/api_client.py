"""
HTTP client for the forecast backend.

Endpoints::

    GET  /weather/forecasts     → forecasts grouped by source
    GET  /weather/resolutions   → observed daily highs
    GET  /weather/accuracy      → per-source MAE/RMSE/accuracy, sorted by MAE
    POST /weather/collect       → {"startDate": "YYYY-MM-DD"}; starts a
                                  collection job and returns immediately

Configuration (``[api]`` in config/default.toml or ``POLYTRACKER_API_URL``):
  base_url         default ``http://localhost:3000``
  timeout_seconds  default 30

Transport failures, non-2xx responses and non-JSON bodies raise
``TrackerApiError``.  Malformed dates inside a valid response raise
``DateParseError`` from the payload parser.  There is no retry.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

import httpx

from polytracker.errors import TrackerApiError
from polytracker.ingestion.payloads import parse_accuracy, parse_forecasts, parse_resolutions
from polytracker.models.accuracy import AccuracySummary
from polytracker.models.weather import ForecastPoint, ResolutionPoint

logger = logging.getLogger(__name__)


class TrackerApiClient:
    """Synchronous client for the ``/weather`` endpoints.

    Usage::

        with TrackerApiClient("http://localhost:3000") as client:
            forecasts = client.fetch_forecasts()
            resolutions = client.fetch_resolutions()

    Attributes:
        base_url: Backend root URL without trailing slash.
        timeout:  Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url:    Backend root URL.
            timeout:     Request timeout in seconds.
            http_client: Pre-built ``httpx.Client`` (must carry ``base_url``);
                         used by tests with ``httpx.MockTransport``.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def __enter__(self) -> "TrackerApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    # ── Requests ───────────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self._http.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TrackerApiError(path, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TrackerApiError(path, str(exc) or type(exc).__name__) from exc
        return resp

    def _get_json(self, path: str) -> Any:
        resp = self._request("GET", path)
        try:
            return resp.json()
        except ValueError as exc:
            raise TrackerApiError(path, "response body is not valid JSON") from exc

    def fetch_forecasts(self) -> dict[str, list[ForecastPoint]]:
        """GET ``/weather/forecasts`` and parse it into points per source.

        Raises:
            TrackerApiError: On transport or HTTP failure or a malformed body.
            DateParseError:  If any forecast date is malformed.
        """
        path = "/weather/forecasts"
        data = self._get_json(path)
        if not isinstance(data, dict):
            raise TrackerApiError(path, "expected an object keyed by source")
        grouped = parse_forecasts(data)
        logger.info("Fetched forecasts for %d source(s): %s", len(grouped), ", ".join(grouped))
        return grouped

    def fetch_resolutions(self) -> list[ResolutionPoint]:
        """GET ``/weather/resolutions``.

        Raises:
            TrackerApiError: On transport or HTTP failure or a malformed body.
            DateParseError:  If any resolution date is malformed.
        """
        path = "/weather/resolutions"
        data = self._get_json(path)
        if not isinstance(data, list):
            raise TrackerApiError(path, "expected a list")
        resolutions = parse_resolutions(data)
        logger.info("Fetched %d resolution(s)", len(resolutions))
        return resolutions

    def fetch_accuracy(self) -> list[AccuracySummary]:
        """GET ``/weather/accuracy``; order is the backend's MAE ranking."""
        path = "/weather/accuracy"
        data = self._get_json(path)
        if not isinstance(data, list):
            raise TrackerApiError(path, "expected a list")
        summaries = parse_accuracy(data)
        logger.info("Fetched accuracy for %d source(s)", len(summaries))
        return summaries

    def trigger_collection(self, start_date: date) -> None:
        """POST ``/weather/collect``.  Returns as soon as the backend accepts the job."""
        self._request("POST", "/weather/collect", json={"startDate": start_date.isoformat()})
        logger.info("Triggered forecast collection from %s", start_date.isoformat())
