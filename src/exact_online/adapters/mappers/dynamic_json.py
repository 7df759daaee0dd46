# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Mutable, schema-free view over parsed JSON.

Purpose:
    Let callers read and write members of arbitrary JSON documents by name or
    index without declaring an entity type, e.g. for endpoints that are not
    modelled or for ad-hoc ``$select`` projections.

Layer:
    adapters/mappers

Behavior:
    * Views wrap the parsed node (``dict``, ``list`` or scalar) by reference.
      Several views may share one node; a write through any of them is visible
      through all of them. Nothing is copied.
    * Reads are permissive: a missing member or an out-of-range index yields
      ``None`` instead of raising.
    * Object and array children come back as new views over the same node, so
      ``view["Lines"][0]["Quantity"] = 2`` updates the original tree.
    * Scalar children are coerced for display-style access. This is lossy
      best-effort access, not round-trip fidelity:

        - legacy ``/Date(ms)/`` strings become ISO-8601 UTC text,
        - integers and floats become culture-invariant decimal text,
        - booleans stay booleans.

      Use :meth:`DynamicJsonView.child` plus the ``as_*`` accessors to read a
      scalar with an explicit type instead.
    * A view graph is not safe for concurrent mutation from several threads.

Example:
    view = DynamicJsonView.parse('{"Code": "C1", "Lines": [{"Qty": 1}]}')
    view.Code                  # "C1"
    view["Lines"][0]["Qty"]    # "1"
    view.Name = "Acme"         # upsert
    view.to_text(indented=False)
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from exact_online.domain.exceptions.conversion import ConversionError, excerpt
from exact_online.domain.services.legacy_date import (
    as_utc,
    decode_legacy_date,
    encode_legacy_date,
    parse_timestamp,
)

__all__ = ["DynamicJsonView"]


def _coerce(leaf: Any) -> Any:
    """Coerce a scalar node to its display form."""
    if isinstance(leaf, str):
        decoded = decode_legacy_date(leaf)
        return decoded.isoformat() if decoded is not None else leaf
    if isinstance(leaf, bool):
        return leaf
    if isinstance(leaf, int):
        return str(leaf)
    if isinstance(leaf, float):
        return repr(leaf)
    if isinstance(leaf, datetime):
        return as_utc(leaf).isoformat()
    return leaf


def _wrap(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, dict | list):
        return DynamicJsonView(node)
    return _coerce(node)


def _to_node(value: Any) -> Any:
    """Convert a value assigned through a view into a tree node."""
    if value is None or isinstance(value, str | bool | int | datetime | dict | list):
        return value
    if isinstance(value, DynamicJsonView):
        return value.node
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot store non-finite number {value!r} in JSON.")
        return value
    if isinstance(value, Decimal):
        return _to_node(float(value))
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Unsupported value type for a JSON node: {type(value).__name__}")


def _encode_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return encode_legacy_date(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


class DynamicJsonView:
    """Reference-semantics wrapper over a JSON tree node.

    Members can be reached with item access (``view["Code"]``, ``view[0]``),
    with :meth:`get`/:meth:`set`, or with attribute access (``view.Code``) for
    names that do not start with an underscore and do not collide with a
    method of this class.
    """

    __slots__ = ("_node",)

    def __init__(self, node: Any = None) -> None:
        """Wrap ``node`` without copying it.

        Args:
            node: Parsed JSON node (``dict``, ``list``, scalar or ``None``).
        """
        object.__setattr__(self, "_node", node)

    @classmethod
    def parse(cls, text: str | bytes) -> DynamicJsonView:
        """Parse ``text`` and wrap the resulting tree.

        Raises:
            ConversionError: If ``text`` is not valid JSON.
        """
        try:
            return cls(json.loads(text))
        except (ValueError, RecursionError) as exc:
            shown = text.decode("utf-8", errors="replace") if isinstance(text, bytes) else text
            raise ConversionError(
                "Json is incorrect.",
                details={"error": str(exc), "excerpt": excerpt(shown)},
            ) from exc

    @property
    def node(self) -> Any:
        """The wrapped tree node (shared, not a copy)."""
        return self._node

    @property
    def is_object(self) -> bool:
        return isinstance(self._node, dict)

    @property
    def is_array(self) -> bool:
        return isinstance(self._node, list)

    # ------------------------------------------------------------------ #
    # Read / write
    # ------------------------------------------------------------------ #

    def get(self, key: str | int) -> Any:
        """Return the coerced or wrapped child at ``key``, or ``None`` on a miss."""
        return _wrap(self._child_node(key))

    def child(self, key: str | int) -> DynamicJsonView:
        """Return a view over the raw child node at ``key`` (``None`` node on a miss).

        Unlike :meth:`get`, scalars are not coerced, so the ``as_*``
        accessors can read them with their JSON type.
        """
        return DynamicJsonView(self._child_node(key))

    def set(self, key: str | int, value: Any) -> None:
        """Write ``value`` at ``key``.

        A string key upserts an object member; when this view does not wrap
        an object, its node is first replaced with a new empty object (the
        replacement is local to this view). An integer key writes an array
        element, padding the array with ``null`` up to ``key``.

        Args:
            key: Member name or array index.
            value: ``None``, another view (its node is shared), a ``dict`` or
                ``list`` node (shared), or a scalar.

        Raises:
            TypeError: On an integer key for a non-array view, an unsupported
                key type, or an unsupported value type.
            IndexError: On a negative index.
        """
        stored = _to_node(value)
        if isinstance(key, str):
            if not isinstance(self._node, dict):
                object.__setattr__(self, "_node", {})
            self._node[key] = stored
            return
        if _is_index(key):
            node = self._node
            if not isinstance(node, list):
                raise TypeError("Integer keys can only be written on array views.")
            if key < 0:
                raise IndexError(f"Negative index {key} is not supported.")
            if key >= len(node):
                node.extend([None] * (key + 1 - len(node)))
            node[key] = stored
            return
        raise TypeError(f"Unsupported key type: {type(key).__name__}")

    def _child_node(self, key: str | int) -> Any:
        node = self._node
        if isinstance(key, str) and isinstance(node, dict):
            return node.get(key)
        if _is_index(key) and isinstance(node, list) and 0 <= key < len(node):
            return node[key]
        return None

    def __getitem__(self, key: str | int) -> Any:
        return self.get(key)

    def __setitem__(self, key: str | int, value: Any) -> None:
        self.set(key, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"Cannot set private attribute {name!r} on a view.")
        self.set(name, value)

    def __contains__(self, key: object) -> bool:
        return isinstance(self._node, dict) and key in self._node

    # ------------------------------------------------------------------ #
    # Typed accessors (explicit None instead of raising)
    # ------------------------------------------------------------------ #

    def as_string(self) -> str | None:
        node = self._node
        if isinstance(node, str):
            return node
        if isinstance(node, int | float) and not isinstance(node, bool):
            return _coerce(node)
        return None

    def as_bool(self) -> bool | None:
        return self._node if isinstance(self._node, bool) else None

    def as_number(self) -> float | None:
        node = self._node
        if isinstance(node, bool):
            return None
        if isinstance(node, int | float):
            return float(node)
        if isinstance(node, str):
            try:
                return float(node)
            except ValueError:
                return None
        return None

    def as_int(self) -> int | None:
        node = self._node
        if isinstance(node, bool):
            return None
        if isinstance(node, int):
            return node
        if isinstance(node, float) and node.is_integer():
            return int(node)
        if isinstance(node, str):
            try:
                return int(node)
            except ValueError:
                return None
        return None

    def as_datetime(self) -> datetime | None:
        node = self._node
        if isinstance(node, datetime):
            return as_utc(node)
        if isinstance(node, str):
            try:
                return parse_timestamp(node)
            except ValueError:
                return None
        return None

    def as_object(self) -> dict[str, Any] | None:
        return self._node if isinstance(self._node, dict) else None

    def as_array(self) -> list[Any] | None:
        return self._node if isinstance(self._node, list) else None

    # ------------------------------------------------------------------ #
    # Serialization / iteration
    # ------------------------------------------------------------------ #

    def to_text(self, indented: bool = True) -> str:
        """Serialize the tree; ``datetime`` leaves are written as ``/Date(ms)/``."""
        if indented:
            return json.dumps(self._node, indent=2, ensure_ascii=False, default=_encode_default)
        return json.dumps(
            self._node, separators=(",", ":"), ensure_ascii=False, default=_encode_default
        )

    def iterate(self) -> Iterator[Any]:
        """Yield array elements, or ``(key, value)`` pairs for objects.

        Values are coerced or wrapped exactly as by :meth:`get`. Scalar and
        ``None`` nodes yield nothing.
        """
        node = self._node
        if isinstance(node, list):
            for item in node:
                yield _wrap(item)
        elif isinstance(node, dict):
            for key, value in node.items():
                yield key, _wrap(value)

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    def __len__(self) -> int:
        return len(self._node) if isinstance(self._node, dict | list) else 0

    def __bool__(self) -> bool:
        return self._node is not None

    def __str__(self) -> str:
        return self.to_text(indented=False)

    def __repr__(self) -> str:
        return f"DynamicJsonView({self.to_text(indented=False)})"
