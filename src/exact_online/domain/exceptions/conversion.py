# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""JSON conversion exceptions.

Purpose:
    Error types raised while unwrapping response envelopes and while
    converting between JSON text and typed entities.

Layer:
    domain/exceptions

Notes:
    - Both types wrap the underlying parse failure via exception chaining
      (``raise ... from exc``); the original message is kept in ``details``.
    - Permissive "missing means None" behavior exists only on dynamic-view read
      paths and is never expressed through these types.
"""

from __future__ import annotations

from typing import Final

from .base import DomainError

_EXCERPT_LIMIT: Final[int] = 200


def excerpt(text: str | None) -> str:
    """Return a bounded prefix of ``text`` suitable for diagnostics."""
    if text is None:
        return ""
    if len(text) <= _EXCERPT_LIMIT:
        return text
    return text[:_EXCERPT_LIMIT] + "..."


class ExactJsonError(DomainError):
    """Base class for JSON shape and conversion failures."""

    code = "INCORRECT_JSON"


class MalformedEnvelope(ExactJsonError):
    """Response text is absent, unparseable, or not shaped like ``{"d": ...}``."""

    code = "MALFORMED_ENVELOPE"


class ConversionError(ExactJsonError):
    """Typed decode or encode failed (type mismatch, unexpected structure)."""

    code = "CONVERSION_ERROR"
