# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Exact Online client core: envelope codec, entity serialization and transport."""

from __future__ import annotations

__version__ = "0.1.0"
