# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Entity gateways."""

from __future__ import annotations

from .entity_gateway import EntityGateway

__all__ = ["EntityGateway"]
