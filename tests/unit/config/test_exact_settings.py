# tests/unit/config/test_exact_settings.py
from __future__ import annotations

import pytest
from pydantic import ValidationError

from exact_online.config.settings import ExactSettings, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("EXACT_BASE_URL", "EXACT_DIVISION", "EXACT_ACCESS_TOKEN", "EXACT_MAX_PAGES"):
        monkeypatch.delenv(name, raising=False)
    settings = ExactSettings()
    assert settings.base_url == "https://start.exactonline.nl"
    assert settings.division is None
    assert settings.access_token is None
    assert settings.timeout_s == 8.0
    assert settings.max_retries == 3
    assert settings.max_pages is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXACT_BASE_URL", "https://start.exactonline.be/")
    monkeypatch.setenv("EXACT_DIVISION", "42")
    monkeypatch.setenv("EXACT_ACCESS_TOKEN", "s3cr3t-value")
    monkeypatch.setenv("EXACT_MAX_PAGES", "7")
    monkeypatch.setenv("EXACT_UNKNOWN_THING", "ignored")

    settings = get_settings()

    assert settings.base_url == "https://start.exactonline.be"
    assert settings.division == 42
    assert settings.access_token is not None
    assert settings.access_token.get_secret_value() == "s3cr3t-value"
    assert "s3cr3t-value" not in repr(settings)
    assert settings.max_pages == 7
    assert settings.api_root == "https://start.exactonline.be/api/v1/42"
    assert get_settings() is settings


def test_api_root_requires_division(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXACT_DIVISION", raising=False)
    with pytest.raises(ValueError):
        _ = ExactSettings().api_root


@pytest.mark.parametrize(
    "kwargs",
    [{"division": 0}, {"timeout_s": 0}, {"max_retries": -1}, {"max_pages": 0}],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        ExactSettings(**kwargs)
