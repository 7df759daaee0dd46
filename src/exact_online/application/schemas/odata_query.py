# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""OData query options.

Purpose:
    Small value object rendering the subset of OData system query options the
    gateway passes through (``$select``, ``$filter``, ``$expand``,
    ``$orderby``, ``$top``). Expressions are passed verbatim; no query
    language parsing or validation happens here.

Layer:
    application/schemas
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ODataQuery:
    """System query options for a collection request."""

    select: Sequence[str] = ()
    where: str | None = None
    expand: Sequence[str] = ()
    order_by: str | None = None
    top: int | None = None

    def __post_init__(self) -> None:
        if self.top is not None and self.top < 1:
            raise ValueError("top must be >= 1 when provided")

    def to_params(self) -> dict[str, str]:
        """Return the query options as request parameters."""
        params: dict[str, str] = {}
        if self.select:
            params["$select"] = ",".join(self.select)
        if self.where:
            params["$filter"] = self.where
        if self.expand:
            params["$expand"] = ",".join(self.expand)
        if self.order_by:
            params["$orderby"] = self.order_by
        if self.top is not None:
            params["$top"] = str(self.top)
        return params
