# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Exact Online API metrics.

Purpose:
    Prometheus metrics for outbound REST API calls:
      * Latency histogram by method/endpoint/outcome.
      * Error counter by reason.
      * HTTP status distribution.
      * Retry counter.

Design:
    - Accessors lazily create and then return process-wide singletons so
      repeated client construction never re-registers a collector.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

_api_latency_seconds: Histogram | None = None
_api_errors_total: Counter | None = None
_api_http_status_total: Counter | None = None
_api_retries_total: Counter | None = None


def get_api_latency_seconds() -> Histogram:
    """Return (and lazily create) the API latency histogram."""
    global _api_latency_seconds
    if _api_latency_seconds is None:
        _api_latency_seconds = Histogram(
            "exact_api_latency_seconds",
            "Latency of Exact Online API calls in seconds.",
            ["method", "endpoint", "outcome"],
        )
    return _api_latency_seconds


def get_api_errors_total() -> Counter:
    """Return (and lazily create) the API error counter."""
    global _api_errors_total
    if _api_errors_total is None:
        _api_errors_total = Counter(
            "exact_api_errors_total",
            "Total number of Exact Online API errors.",
            ["method", "endpoint", "reason"],
        )
    return _api_errors_total


def get_api_http_status_total() -> Counter:
    """Return (and lazily create) the HTTP status counter."""
    global _api_http_status_total
    if _api_http_status_total is None:
        _api_http_status_total = Counter(
            "exact_api_http_status_total",
            "Exact Online API responses by status code.",
            ["method", "endpoint", "status"],
        )
    return _api_http_status_total


def get_api_retries_total() -> Counter:
    """Return (and lazily create) the retry counter."""
    global _api_retries_total
    if _api_retries_total is None:
        _api_retries_total = Counter(
            "exact_api_retries_total",
            "Total number of Exact Online API retries.",
            ["method", "endpoint", "reason"],
        )
    return _api_retries_total
