# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Observability (metrics) helpers."""
