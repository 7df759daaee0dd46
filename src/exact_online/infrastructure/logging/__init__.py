# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Logging helpers."""

from __future__ import annotations

from .logger import (
    configure_root_logging,
    get_json_logger,
    get_request_id,
    get_trace_id,
    set_request_context,
)

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "get_request_id",
    "get_trace_id",
    "set_request_context",
]
