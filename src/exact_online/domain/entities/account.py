# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Account Entity

Purpose:
    CRM account (customer/supplier) as exposed by ``crm/Accounts``.

Layer: domain/entities
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from .base import NIL_ID, ExactEntity, read_only_field


class Account(ExactEntity):
    """CRM account.

    Only a representative subset of the remote fields is modelled; unknown
    members in responses are ignored.
    """

    id: UUID = Field(NIL_ID, alias="ID")
    code: str | None = Field(None, alias="Code")
    name: str | None = Field(None, alias="Name")
    email: str | None = Field(None, alias="Email")
    status: str | None = Field(None, alias="Status")
    is_supplier: bool | None = Field(None, alias="IsSupplier")
    credit_line_sales: float | None = Field(None, alias="CreditLineSales")
    start_date: datetime | None = Field(None, alias="StartDate")
    created: datetime | None = read_only_field("Created")
    modified: datetime | None = read_only_field("Modified")
    division: int | None = read_only_field("Division")
