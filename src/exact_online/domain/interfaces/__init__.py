# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Domain ports (Protocols) implemented by outer layers."""

from __future__ import annotations

from .entity_controller import ControllerLookup, EntityController

__all__ = ["ControllerLookup", "EntityController"]
