# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Pure domain services (no I/O)."""
