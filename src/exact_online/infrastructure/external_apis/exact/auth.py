# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Static bearer token provider.

The OAuth2 authorization and refresh flow is out of scope for this package;
production callers plug in their own :class:`TokenProvider`. This provider
serves a fixed token for scripts and tests.
"""

from __future__ import annotations

from pydantic import SecretStr

from exact_online.config.settings import ExactSettings


class StaticTokenProvider:
    """Token provider returning one pre-issued access token."""

    def __init__(self, token: SecretStr | str) -> None:
        self._token = token if isinstance(token, SecretStr) else SecretStr(token)
        if not self._token.get_secret_value():
            raise ValueError("Access token must not be empty.")

    @classmethod
    def from_settings(cls, settings: ExactSettings) -> StaticTokenProvider:
        """Build a provider from ``EXACT_ACCESS_TOKEN``.

        Raises:
            ValueError: If no access token is configured.
        """
        if settings.access_token is None:
            raise ValueError("EXACT_ACCESS_TOKEN is not configured.")
        return cls(settings.access_token)

    async def get_access_token(self) -> str:
        return self._token.get_secret_value()
