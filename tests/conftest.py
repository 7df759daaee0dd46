# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator

import pytest

from exact_online.config.settings import ExactSettings, get_settings
from exact_online.infrastructure.logging import logger as logger_module


@pytest.fixture(autouse=True)
def _clear_request_context() -> Iterator[None]:
    """Start every test without correlation ids set."""
    request_token = logger_module._REQUEST_ID_CTX.set(None)
    trace_token = logger_module._TRACE_ID_CTX.set(None)
    yield
    logger_module._REQUEST_ID_CTX.reset(request_token)
    logger_module._TRACE_ID_CTX.reset(trace_token)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> ExactSettings:
    """Settings pointing at a fixed division on the default host."""
    return ExactSettings(
        base_url="https://start.exactonline.nl",
        division=12345,
        access_token="token-abc",
        max_retries=2,
    )
