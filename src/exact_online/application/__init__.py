# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application layer: change tracking and query options."""
