# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""JSON mappers between wire text, typed entities and dynamic views."""

from __future__ import annotations

from .diff_converter import DiffContext, DiffConverter
from .dynamic_json import DynamicJsonView
from .entity_converter import EntitySerializer
from .envelope import EnvelopeCodec

__all__ = [
    "DiffContext",
    "DiffConverter",
    "DynamicJsonView",
    "EntitySerializer",
    "EnvelopeCodec",
]
