# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application value objects."""
