# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Response envelope codec.

Purpose:
    Strip the server's ``{"d": ...}`` root wrapper from response bodies and
    re-emit envelope-free JSON text that typed decoding and dynamic views can
    consume directly.

Layer:
    adapters/mappers

Wire contract:
    * Single entity: ``{"d": {...fields...}}``
    * Collection: ``{"d": {"results": [...]}}`` or ``{"d": [...]}``
    * Continuation: ``{"d": {"results": [...], "__next": "...?$skiptoken=TOKEN"}}``
    * Nested sub-collection: ``{"Lines": {"results": [...]}}`` → ``{"Lines": [...]}``

Notes:
    - There is one flattening rule, applied at every depth: scalar members
      (string, number, bool, null) are kept, ``{"results": [...]}`` members
      become plain arrays of their flattened object elements, and every other
      member (deferred navigation links, ``__metadata`` blocks, bare arrays)
      is dropped. Non-object array elements are dropped.
    - Output is compact JSON produced by :mod:`json`, which never depends on
      the process locale.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Final, NoReturn

from exact_online.domain.exceptions.conversion import MalformedEnvelope, excerpt
from exact_online.infrastructure.logging.logger import get_json_logger

__all__ = [
    "EnvelopeCodec",
    "extract_continuation_token",
    "flatten_array",
    "flatten_object",
    "unwrap_array",
    "unwrap_object",
]

logger = get_json_logger(__name__)

ROOT_KEY: Final[str] = "d"
RESULTS_KEY: Final[str] = "results"
NEXT_KEY: Final[str] = "__next"

_SKIP_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$skiptoken=([^&#]*)")


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _parse_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {raw}")
    return value


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, str | int | float | bool)


def flatten_object(obj: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the flattening rule to one JSON object (recursively)."""
    flattened: dict[str, Any] = {}
    for key, value in obj.items():
        if _is_scalar(value):
            flattened[key] = value
        elif isinstance(value, Mapping) and isinstance(value.get(RESULTS_KEY), list):
            flattened[key] = flatten_array(value[RESULTS_KEY])
    return flattened


def flatten_array(items: Sequence[Any]) -> list[dict[str, Any]]:
    """Flatten each object element of ``items``; other elements are dropped."""
    return [flatten_object(item) for item in items if isinstance(item, Mapping)]


class EnvelopeCodec:
    """Stateless codec for the ``{"d": ...}`` response envelope."""

    def unwrap_object(self, text: str | bytes | None) -> str:
        """Return the single entity wrapped in ``d`` as envelope-free JSON.

        Args:
            text: Raw response body.

        Returns:
            Compact JSON object text with sub-collections flattened.

        Raises:
            MalformedEnvelope: If ``text`` is not JSON or ``d`` is missing or
                not an object.
        """
        payload = self._payload(text, operation="unwrap_object")
        if not isinstance(payload, Mapping):
            self._fail(
                "Property 'd' is missing or not an object.",
                operation="unwrap_object",
                text=text,
            )
        return self._render(flatten_object, payload, operation="unwrap_object", text=text)

    def unwrap_array(self, text: str | bytes | None) -> str:
        """Return the collection wrapped in ``d`` as an envelope-free JSON array.

        Both ``{"d": [...]}`` and ``{"d": {"results": [...]}}`` are accepted and
        produce identical output.

        Raises:
            MalformedEnvelope: If ``text`` is not JSON or neither shape matches.
        """
        payload = self._payload(text, operation="unwrap_array")
        if isinstance(payload, Mapping) and isinstance(payload.get(RESULTS_KEY), list):
            results: list[Any] = payload[RESULTS_KEY]
        elif isinstance(payload, list):
            results = payload
        else:
            self._fail(
                "No ['d']['results'] token found in response.",
                operation="unwrap_array",
                text=text,
            )
        return self._render(flatten_array, results, operation="unwrap_array", text=text)

    def extract_continuation_token(self, text: str | bytes | None) -> str | None:
        """Return the ``$skiptoken`` of the next page, if the response has one.

        Only unparseable top-level JSON raises; every other miss (``d`` not an
        object, no ``__next`` link, no ``$skiptoken`` parameter) yields ``None``.

        Raises:
            MalformedEnvelope: If ``text`` is not valid JSON.
        """
        root = self._parse(text, operation="extract_continuation_token")
        if not isinstance(root, Mapping):
            return None
        payload = root.get(ROOT_KEY)
        if not isinstance(payload, Mapping):
            return None
        next_link = payload.get(NEXT_KEY)
        if not isinstance(next_link, str):
            return None
        match = _SKIP_TOKEN_PATTERN.search(next_link)
        return match.group(1) if match else None

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _parse(self, text: str | bytes | None, *, operation: str) -> Any:
        if text is None:
            self._fail("JSON is null.", operation=operation, text=text)
        try:
            return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_float)
        except (ValueError, RecursionError) as exc:
            self._fail(str(exc), operation=operation, text=text, cause=exc)

    def _payload(self, text: str | bytes | None, *, operation: str) -> Any:
        root = self._parse(text, operation=operation)
        if not isinstance(root, Mapping) or ROOT_KEY not in root:
            self._fail("Property 'd' is missing.", operation=operation, text=text)
        return root[ROOT_KEY]

    def _render(
        self,
        flatten: Callable[[Any], Any],
        payload: Any,
        *,
        operation: str,
        text: str | bytes | None,
    ) -> str:
        try:
            return _dumps(flatten(payload))
        except RecursionError as exc:
            self._fail("JSON nesting is too deep.", operation=operation, text=text, cause=exc)

    @staticmethod
    def _fail(
        message: str,
        *,
        operation: str,
        text: str | bytes | None,
        cause: Exception | None = None,
    ) -> NoReturn:
        shown = text.decode("utf-8", errors="replace") if isinstance(text, bytes) else text
        details = {"operation": operation, "excerpt": excerpt(shown)}
        logger.debug(
            "envelope.%s.malformed",
            operation,
            extra={"extra": {"reason": message, "operation": operation}},
        )
        raise MalformedEnvelope(message, details=details) from cause


_DEFAULT_CODEC: Final[EnvelopeCodec] = EnvelopeCodec()

unwrap_object = _DEFAULT_CODEC.unwrap_object
unwrap_array = _DEFAULT_CODEC.unwrap_array
extract_continuation_token = _DEFAULT_CODEC.extract_continuation_token
