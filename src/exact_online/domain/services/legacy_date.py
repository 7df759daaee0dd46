# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Legacy date codec.

Purpose:
    Convert between calendar timestamps and the remote API's legacy date token
    ``"/Date(<milliseconds since epoch>)/"``, plus the minute-precision text
    form used when writing entity fields.

Layer:
    domain/services

Notes:
    - All results are timezone-aware UTC datetimes. Naive inputs are treated
      as UTC; the ambient locale and local timezone are never consulted.
    - A trailing ``+HHMM``/``-HHMM`` offset inside the token is accepted on
      read and ignored. Tokens are always written without an offset.
    - Year values are always rendered with four digits.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Final

__all__ = [
    "LEGACY_DATE_PATTERN",
    "as_utc",
    "decode_legacy_date",
    "encode_legacy_date",
    "format_edm_datetime",
    "is_legacy_date",
    "parse_timestamp",
]

LEGACY_DATE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^/Date\((\d+)([+-]\d{4})?\)/$")

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS: Final[timedelta] = timedelta(milliseconds=1)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_legacy_date(value: str) -> bool:
    """Return True when ``value`` is a ``/Date(ms)/`` token."""
    return LEGACY_DATE_PATTERN.match(value) is not None


def decode_legacy_date(value: str) -> datetime | None:
    """Decode a ``/Date(ms)/`` token.

    Args:
        value: Candidate token, e.g. ``"/Date(1577836800000)/"`` or
            ``"/Date(1577836800000+0100)/"``.

    Returns:
        Aware UTC datetime, or ``None`` if ``value`` is not a legacy token.
    """
    match = LEGACY_DATE_PATTERN.match(value)
    if match is None:
        return None
    return _EPOCH + timedelta(milliseconds=int(match.group(1)))


def encode_legacy_date(value: datetime) -> str:
    """Encode ``value`` as ``/Date(ms)/`` with millisecond precision."""
    millis = (as_utc(value) - _EPOCH) // _ONE_MS
    return f"/Date({millis})/"


def format_edm_datetime(value: datetime) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM`` in UTC (minute precision)."""
    utc = as_utc(value)
    return f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}T{utc.hour:02d}:{utc.minute:02d}"


def parse_timestamp(value: str) -> datetime:
    """Parse a timestamp field value read from the wire.

    Both ISO-8601 text and legacy tokens are accepted. ISO text without an
    offset is interpreted as UTC.

    Args:
        value: Raw string value of a timestamp field.

    Returns:
        Aware UTC datetime.

    Raises:
        ValueError: If ``value`` is neither ISO-8601 text nor a legacy token.
    """
    legacy = decode_legacy_date(value)
    if legacy is not None:
        return legacy
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date value: {value!r}") from exc
    return as_utc(parsed)
