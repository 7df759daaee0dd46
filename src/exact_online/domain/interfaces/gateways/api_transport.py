# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Domain Interface: API transport and credentials.

Synopsis:
    Ports for the collaborators that sit below the JSON layer: a bearer token
    source and an executor returning raw response text. The token flow itself
    (OAuth2 authorization and refresh) lives outside this package.

Layer:
    domain/interfaces/gateways
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class TokenProvider(Protocol):
    """Source of a currently valid bearer token."""

    async def get_access_token(self) -> str:
        """Return the access token to send in the ``Authorization`` header."""


class ApiTransport(Protocol):
    """Raw-text HTTP executor for the remote REST API.

    Implementations map non-success statuses to ``ExactApiError`` subtypes and
    never leak transport library exceptions.
    """

    async def get_text(self, endpoint: str, *, params: Mapping[str, Any] | None = None) -> str:
        """Issue a GET for ``endpoint`` and return the response body."""

    async def post_text(self, endpoint: str, body: str) -> str:
        """POST a JSON ``body`` to ``endpoint`` and return the response body."""

    async def put_text(self, endpoint: str, body: str) -> str:
        """PUT a JSON ``body`` to ``endpoint`` and return the response body."""

    async def delete(self, endpoint: str) -> None:
        """Issue a DELETE for ``endpoint``."""
