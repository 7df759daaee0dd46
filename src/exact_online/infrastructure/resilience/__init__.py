# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Resilience primitives for outbound calls."""
