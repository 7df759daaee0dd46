# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Change Tracking Domain Exceptions

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class EntityNotTracked(DomainError):
    """An update was requested for an entity with no recorded original state."""

    code = "ENTITY_NOT_TRACKED"
