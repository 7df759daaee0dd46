# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
API Transport Domain Exceptions

Purpose:
    Exceptions representing failures reported by the remote REST API or the
    transport that reaches it. httpx types never cross this boundary.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class ExactApiError(DomainError):
    """Base class for remote API failures."""

    code = "API_ERROR"


class ApiBadRequest(ExactApiError):
    """Upstream rejected the request (4xx other than 401/404/429)."""

    code = "API_BAD_REQUEST"


class ApiUnauthorized(ExactApiError):
    """Bearer token missing, expired, or rejected."""

    code = "API_UNAUTHORIZED"


class ApiNotFound(ExactApiError):
    """Requested resource or entity does not exist."""

    code = "API_NOT_FOUND"


class ApiUnavailable(ExactApiError):
    """Upstream is rate limiting, failing (5xx) or unreachable."""

    code = "API_UNAVAILABLE"
