# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Exact Online external API package.

Purpose:
    Group Exact Online infrastructure modules:

    * client: Resilient async HTTP transport returning raw response text.
    * auth: Bearer token providers.
"""

from __future__ import annotations
