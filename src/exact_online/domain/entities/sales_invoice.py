# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Sales Invoice Entities

Purpose:
    Sales invoice header with its nested invoice lines
    (``salesinvoice/SalesInvoices``). Lines are the canonical example of a
    nested entity collection that is diffed item by item on update.

Layer: domain/entities
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from .base import NIL_ID, ExactEntity, read_only_field


class SalesInvoiceLine(ExactEntity):
    """Single invoice line."""

    id: UUID = Field(NIL_ID, alias="ID")
    invoice_id: UUID = Field(NIL_ID, alias="InvoiceID")
    item: UUID | None = Field(None, alias="Item")
    description: str | None = Field(None, alias="Description")
    quantity: float | None = Field(None, alias="Quantity")
    unit_price: float | None = Field(None, alias="UnitPrice")
    line_number: int | None = read_only_field("LineNumber")
    amount_dc: float | None = read_only_field("AmountDC")


class SalesInvoice(ExactEntity):
    """Sales invoice header."""

    invoice_id: UUID = Field(NIL_ID, alias="InvoiceID")
    invoice_to: UUID | None = Field(None, alias="InvoiceTo")
    ordered_by: UUID | None = Field(None, alias="OrderedBy")
    journal: str | None = Field(None, alias="Journal")
    description: str | None = Field(None, alias="Description")
    currency: str | None = Field(None, alias="Currency")
    invoice_date: datetime | None = Field(None, alias="InvoiceDate")
    sales_invoice_lines: list[SalesInvoiceLine] = Field(
        default_factory=list, alias="SalesInvoiceLines"
    )
    invoice_number: int | None = read_only_field("InvoiceNumber")
    amount_dc: float | None = read_only_field("AmountDC")
    status: int | None = read_only_field("Status")
