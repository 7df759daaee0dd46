# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Client Configuration (Pydantic Settings, v2)

Summary:
    Typed configuration for the Exact Online client core. Values are read
    from environment variables prefixed with ``EXACT_``.

Design:
    - Pydantic v2 BaseSettings; unknown ``EXACT_*`` variables are ignored.
    - Secrets are held as ``SecretStr`` and never logged.
    - Singleton accessor `get_settings()` with LRU cache; tests construct
      `ExactSettings` directly or clear the cache.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExactSettings(BaseSettings):
    """Configuration for the REST transport and entity gateway.

    Environment variables (with ``model_config.env_prefix``):

    * ``EXACT_BASE_URL``
    * ``EXACT_DIVISION``
    * ``EXACT_ACCESS_TOKEN``
    * ``EXACT_TIMEOUT_S``
    * ``EXACT_MAX_RETRIES``
    * ``EXACT_USER_AGENT``
    * ``EXACT_MAX_PAGES``
    """

    base_url: str = Field(
        "https://start.exactonline.nl",
        description="Base URL of the regional Exact Online site.",
    )
    division: int | None = Field(
        None,
        ge=1,
        description="Administration (division) number used in every API path.",
    )
    access_token: SecretStr | None = Field(
        None,
        description=(
            "Static bearer token. Normally tokens come from an external OAuth2 "
            "token provider; this is a convenience for scripts and tests."
        ),
    )
    timeout_s: float = Field(
        8.0,
        gt=0,
        description="Per-request timeout in seconds for the transport client.",
    )
    max_retries: int = Field(
        3,
        ge=0,
        description="Maximum number of retry attempts for retryable failures.",
    )
    user_agent: str = Field(
        "exact-online-client/0.1",
        description="User agent sent with every request.",
    )
    max_pages: int | None = Field(
        None,
        ge=1,
        description="Upper bound on pages followed when reading a collection.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="EXACT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def api_root(self) -> str:
        """Return ``{base_url}/api/v1/{division}``.

        Raises:
            ValueError: If no division is configured.
        """
        if self.division is None:
            raise ValueError("EXACT_DIVISION must be configured to build API paths.")
        return f"{self.base_url}/api/v1/{self.division}"


@lru_cache(maxsize=1)
def get_settings() -> ExactSettings:
    """Return the process-wide settings instance."""
    return ExactSettings()
