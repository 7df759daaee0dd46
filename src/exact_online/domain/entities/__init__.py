# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Typed API entities."""

from __future__ import annotations

from .account import Account
from .base import NIL_ID, ExactEntity, FieldDescriptor, read_only_field
from .sales_invoice import SalesInvoice, SalesInvoiceLine
from .sync import SupportsSync, SyncAccount

__all__ = [
    "NIL_ID",
    "Account",
    "ExactEntity",
    "FieldDescriptor",
    "SalesInvoice",
    "SalesInvoiceLine",
    "SupportsSync",
    "SyncAccount",
    "read_only_field",
]
