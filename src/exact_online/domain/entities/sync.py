# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Sync Entities

Purpose:
    Base for entities served by the ``sync/...`` endpoints, which add a
    ``Timestamp`` row version used to resume incremental reads.

Layer: domain/entities

Notes:
    The API may send ``Timestamp`` as a JSON number or as a numeric string;
    both decode to ``int``.
"""
from __future__ import annotations

from .account import Account
from .base import ExactEntity, read_only_field


class SupportsSync(ExactEntity):
    """Entity carrying the sync API row version."""

    timestamp: int | None = read_only_field("Timestamp")


class SyncAccount(Account, SupportsSync):
    """Account as returned by ``sync/CRM/Accounts``."""
