# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Domain layer: entities, exceptions, pure services and ports."""
