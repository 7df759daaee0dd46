# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Gateway ports."""

from __future__ import annotations

from .api_transport import ApiTransport, TokenProvider

__all__ = ["ApiTransport", "TokenProvider"]
