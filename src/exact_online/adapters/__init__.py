# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Adapters layer: JSON mappers and entity gateways."""
