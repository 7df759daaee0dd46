# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Exact Online Transport Client: resilient, instrumented, async.

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with per-request timeout.
* Bearer authentication through a pluggable token provider.
* Jittered exponential retries (bounded) for 429, 5xx and network failures;
  honors ``Retry-After`` seconds between attempts (never after the last one).
* Deterministic mapping to API domain errors.
* Prometheus-style metrics and request/trace id propagation.

Return shapes:
    Every call returns the raw response body as text (``""`` for bodiless
    responses). Envelope unwrapping and typed decoding happen in the mappers;
    this module never interprets payloads beyond error messages.

Notes:
    * Endpoints are relative to ``{base_url}/api/v1/{division}/``, e.g.
      ``crm/Accounts`` or ``salesinvoice/SalesInvoices(guid'...')``.
    * Caller-facing exceptions are always ``ExactApiError`` subtypes; httpx
      types never cross the boundary.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from contextlib import suppress
from typing import Any, Final

import httpx

from exact_online.config.settings import ExactSettings
from exact_online.domain.exceptions.api import (
    ApiBadRequest,
    ApiNotFound,
    ApiUnauthorized,
    ApiUnavailable,
    ExactApiError,
)
from exact_online.domain.interfaces.gateways.api_transport import TokenProvider
from exact_online.infrastructure.logging.logger import (
    get_json_logger,
    get_request_id,
    get_trace_id,
)
from exact_online.infrastructure.observability.metrics_exact import (
    get_api_errors_total,
    get_api_http_status_total,
    get_api_latency_seconds,
    get_api_retries_total,
)
from exact_online.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = get_json_logger(__name__)

_DEFAULT_BASE_BACKOFF: Final[float] = 0.25
_DEFAULT_MAX_BACKOFF: Final[float] = 2.5

_JSON_CONTENT_TYPE: Final[str] = "application/json"


def _parse_retry_after(val: str | None) -> float | None:
    """Parse the HTTP ``Retry-After`` header (seconds form only)."""
    if not val:
        return None
    try:
        return max(0.0, float(val))
    except ValueError:
        return None


def _retry_after_delay(exc: Exception) -> float | None:
    """Return the ``Retry-After`` delay recorded on a rate-limit error, if any."""
    if isinstance(exc, ApiUnavailable):
        return exc.details.get("retry_after_s")
    return None


def _endpoint_label(endpoint: str) -> str:
    """Reduce an endpoint to a low-cardinality metrics label (keys stripped)."""
    return endpoint.split("(", 1)[0].split("?", 1)[0].strip("/")


def _error_message(response: httpx.Response) -> str | None:
    """Extract ``error.message.value`` from an OData error body, if present."""
    with suppress(ValueError):
        body = response.json()
        if isinstance(body, Mapping) and isinstance(body.get("error"), Mapping):
            message = body["error"].get("message")
            if isinstance(message, Mapping):
                message = message.get("value")
            if isinstance(message, str):
                return message
    return None


class ExactApiClient:
    """Resilient, instrumented raw-text transport for the Exact Online REST API."""

    def __init__(
        self,
        settings: ExactSettings,
        token_provider: TokenProvider,
        *,
        http: httpx.AsyncClient | None = None,
        timeout_s: float | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize the transport client.

        Args:
            settings: Client settings (base URL, division, timeouts).
            token_provider: Source of the bearer token, queried per attempt so
                refreshed tokens are picked up on retries.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            timeout_s: Optional per-request timeout override in seconds.
            retry_policy: Optional retry configuration for retryable failures.
        """
        self._settings = settings
        self._api_root = settings.api_root
        self._tokens = token_provider
        self._timeout = float(timeout_s if timeout_s is not None else settings.timeout_s)

        default_headers = {"Accept": _JSON_CONTENT_TYPE, "User-Agent": settings.user_agent}
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=self._timeout, headers=default_headers)
        if http is not None:
            for key, value in default_headers.items():
                self._client.headers.setdefault(key, value)

        self._retry = retry_policy or RetryPolicy(
            total=settings.max_retries,
            base=_DEFAULT_BASE_BACKOFF,
            cap=_DEFAULT_MAX_BACKOFF,
            jitter=True,
        )

        self._latency = get_api_latency_seconds()
        self._errors = get_api_errors_total()
        self._status_total = get_api_http_status_total()
        self._retries_total = get_api_retries_total()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> ExactApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Public API (ApiTransport)
    # ------------------------------------------------------------------ #

    async def get_text(self, endpoint: str, *, params: Mapping[str, Any] | None = None) -> str:
        """GET ``endpoint`` and return the response body."""
        return await self._request("GET", endpoint, params=params)

    async def post_text(self, endpoint: str, body: str) -> str:
        """POST a JSON ``body`` and return the response body (created entity)."""
        return await self._request("POST", endpoint, body=body)

    async def put_text(self, endpoint: str, body: str) -> str:
        """PUT a JSON ``body``; the API normally answers ``204`` with no body."""
        return await self._request("PUT", endpoint, body=body)

    async def delete(self, endpoint: str) -> None:
        """DELETE ``endpoint``."""
        await self._request("DELETE", endpoint)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: str | None = None,
    ) -> str:
        """Perform one logical request with retries, metrics and error mapping.

        Raises:
            ApiUnauthorized: On 401.
            ApiNotFound: On 404.
            ApiBadRequest: On other 4xx.
            ApiUnavailable: On 429, 5xx or transport failures once retries
                are exhausted.
        """
        url = f"{self._api_root}/{endpoint.lstrip('/')}"
        label = _endpoint_label(endpoint)

        async def _call() -> str:
            response = await self._send(method, url, params=params, body=body, endpoint=label)
            return await self._handle_response(response, method=method, endpoint=label)

        def _on_retry(attempt: int, exc: Exception) -> None:
            self._retries_total.labels(method, label, type(exc).__name__).inc()
            logger.warning(
                "exact.http.retry",
                extra={
                    "extra": {
                        "method": method,
                        "endpoint": label,
                        "attempt": attempt + 1,
                        "reason": type(exc).__name__,
                    }
                },
            )

        start = time.perf_counter()
        error_reason: str | None = None
        try:
            return await retry_async(
                _call,
                policy=self._retry,
                retry_on=lambda exc: isinstance(exc, ApiUnavailable),
                on_retry=_on_retry,
                delay_for=_retry_after_delay,
            )
        except ExactApiError as exc:
            error_reason = type(exc).__name__
            raise
        finally:
            elapsed = time.perf_counter() - start
            outcome = "error" if error_reason else "success"
            self._latency.labels(method=method, endpoint=label, outcome=outcome).observe(elapsed)
            if error_reason:
                self._errors.labels(method=method, endpoint=label, reason=error_reason).inc()

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None,
        body: str | None,
        endpoint: str,
    ) -> httpx.Response:
        """Execute a single HTTP exchange and map transport errors."""
        headers: dict[str, str] = {
            "Authorization": f"Bearer {await self._tokens.get_access_token()}",
        }
        request_id = get_request_id()
        trace_id = get_trace_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        if trace_id:
            headers["x-trace-id"] = trace_id
        if body is not None:
            headers["Content-Type"] = _JSON_CONTENT_TYPE

        try:
            return await self._client.request(
                method,
                url,
                params=dict(params) if params else None,
                content=body.encode("utf-8") if body is not None else None,
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            raise ApiUnavailable(
                "Exact Online transport failure.",
                details={"endpoint": endpoint, "method": method, "error": str(exc)},
            ) from exc

    async def _handle_response(
        self, response: httpx.Response, *, method: str, endpoint: str
    ) -> str:
        """Map an HTTP response into its body text or a domain error."""
        status = response.status_code
        self._status_total.labels(method, endpoint, str(status)).inc()

        details: dict[str, Any] = {"endpoint": endpoint, "method": method, "status": status}
        if status < 400:
            return response.text

        message = _error_message(response)
        if message:
            details["message"] = message

        if status == 401:
            raise ApiUnauthorized("Exact Online rejected the access token.", details=details)
        if status == 404:
            raise ApiNotFound("Exact Online resource not found.", details=details)
        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            details["retry_after_s"] = retry_after
            raise ApiUnavailable("Exact Online rate limited.", details=details)
        if status >= 500:
            raise ApiUnavailable("Exact Online upstream unavailable.", details=details)
        raise ApiBadRequest(message or "Exact Online bad request.", details=details)
