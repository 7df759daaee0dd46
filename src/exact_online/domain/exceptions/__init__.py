# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Domain exception exports."""

from __future__ import annotations

from .api import ApiBadRequest, ApiNotFound, ApiUnauthorized, ApiUnavailable, ExactApiError
from .base import DomainError
from .conversion import ConversionError, ExactJsonError, MalformedEnvelope
from .tracking import EntityNotTracked

__all__ = [
    "ApiBadRequest",
    "ApiNotFound",
    "ApiUnauthorized",
    "ApiUnavailable",
    "ConversionError",
    "DomainError",
    "EntityNotTracked",
    "ExactApiError",
    "ExactJsonError",
    "MalformedEnvelope",
]
