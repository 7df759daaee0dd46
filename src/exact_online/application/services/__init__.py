# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application services."""
