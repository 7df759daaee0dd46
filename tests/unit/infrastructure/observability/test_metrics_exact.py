# tests/unit/infrastructure/observability/test_metrics_exact.py
from __future__ import annotations

from prometheus_client import REGISTRY

from exact_online.infrastructure.observability.metrics_exact import (
    get_api_errors_total,
    get_api_http_status_total,
    get_api_latency_seconds,
    get_api_retries_total,
)


def test_accessors_return_singletons() -> None:
    assert get_api_latency_seconds() is get_api_latency_seconds()
    assert get_api_errors_total() is get_api_errors_total()
    assert get_api_http_status_total() is get_api_http_status_total()
    assert get_api_retries_total() is get_api_retries_total()


def test_status_counter_is_labelled_and_registered() -> None:
    labels = {"method": "GET", "endpoint": "metrics/test", "status": "200"}
    before = REGISTRY.get_sample_value("exact_api_http_status_total", labels) or 0.0
    get_api_http_status_total().labels(**labels).inc()
    assert REGISTRY.get_sample_value("exact_api_http_status_total", labels) == before + 1


def test_latency_histogram_observes() -> None:
    labels = {"method": "GET", "endpoint": "metrics/test", "outcome": "success"}
    before = REGISTRY.get_sample_value("exact_api_latency_seconds_count", labels) or 0.0
    get_api_latency_seconds().labels(**labels).observe(0.01)
    assert REGISTRY.get_sample_value("exact_api_latency_seconds_count", labels) == before + 1
