# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Infrastructure layer: logging, resilience, metrics and HTTP transport."""
