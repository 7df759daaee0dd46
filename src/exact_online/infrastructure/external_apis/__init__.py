# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""External API transports."""
