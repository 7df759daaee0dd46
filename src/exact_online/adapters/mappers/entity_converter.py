# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Entity serializer: JSON text ↔ typed entities and dynamic views.

Purpose:
    Public conversion surface used by the entity gateway. Input text is the
    envelope-free JSON produced by :mod:`exact_online.adapters.mappers.envelope`;
    output text is what the transport sends in request bodies.

Layer:
    adapters/mappers

Notes:
    - Typed decoding is delegated to pydantic. Every parse or shape failure
      surfaces as :class:`ConversionError` chained from the pydantic or
      :mod:`json` error; no partial entity is ever returned.
    - Encoding goes through :class:`DiffConverter`. A payload without any
      eligible field is written as ``{}``.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from exact_online.adapters.mappers.diff_converter import DiffContext, DiffConverter
from exact_online.adapters.mappers.dynamic_json import DynamicJsonView
from exact_online.domain.entities.base import ExactEntity
from exact_online.domain.exceptions.conversion import ConversionError, excerpt
from exact_online.domain.interfaces.entity_controller import ControllerLookup
from exact_online.infrastructure.logging.logger import get_json_logger

__all__ = ["EntitySerializer"]

logger = get_json_logger(__name__)

T = TypeVar("T", bound=ExactEntity)


@lru_cache(maxsize=None)
def _list_adapter(entity_type: type[ExactEntity]) -> TypeAdapter[Any]:
    return TypeAdapter(list[entity_type] | None)  # type: ignore[valid-type]


def _as_str(text: str | bytes) -> str:
    return text.decode("utf-8", errors="replace") if isinstance(text, bytes) else text


class EntitySerializer:
    """Convert between JSON text and :class:`ExactEntity` instances."""

    def __init__(self, converter: DiffConverter | None = None) -> None:
        """Initialize the serializer.

        Args:
            converter: Field writer; a default :class:`DiffConverter` if omitted.
        """
        self._converter = converter or DiffConverter()

    # ------------------------------------------------------------------ #
    # Typed decoding
    # ------------------------------------------------------------------ #

    def decode(self, entity_type: type[T], text: str | bytes | None) -> T:
        """Decode one entity from envelope-free JSON object text.

        Raises:
            ConversionError: On invalid JSON or a payload that does not fit
                ``entity_type``.
        """
        if text is None:
            raise ConversionError(
                "Cannot convert an empty response to an entity.",
                details={"entity": entity_type.__name__},
            )
        try:
            return entity_type.model_validate_json(text)
        except ValidationError as exc:
            raise self._conversion_error(
                "An exception occurred while converting JSON to object.",
                entity_type=entity_type,
                text=text,
                exc=exc,
            ) from exc

    def decode_list(self, entity_type: type[T], text: str | bytes | None) -> list[T]:
        """Decode a JSON array of entities.

        ``None``, blank text and ``null`` yield an empty list.

        Raises:
            ConversionError: On invalid JSON or elements that do not fit
                ``entity_type``.
        """
        if text is None or not _as_str(text).strip():
            return []
        try:
            decoded = _list_adapter(entity_type).validate_json(text)
        except ValidationError as exc:
            raise self._conversion_error(
                "An error occurred while processing the json string. Possibly the "
                "result is too big. Please make a more specific query.",
                entity_type=entity_type,
                text=text,
                exc=exc,
            ) from exc
        return list(decoded or [])

    # ------------------------------------------------------------------ #
    # Typed encoding
    # ------------------------------------------------------------------ #

    def encode(self, entity: ExactEntity) -> str:
        """Serialize every writable, non-nil-identifier field of ``entity``."""
        return self._dumps(self._converter.to_payload(entity, DiffContext()), entity)

    def encode_diff(
        self,
        original: ExactEntity,
        current: ExactEntity,
        lookup: ControllerLookup | None = None,
    ) -> str:
        """Serialize only the fields of ``current`` that differ from ``original``.

        Args:
            original: Snapshot taken when the entity was loaded.
            current: Entity in its edited state; same type as ``original``.
            lookup: Controller lookup for nested collection items.

        Returns:
            JSON object text; ``{}`` when nothing changed.

        Raises:
            ConversionError: If ``original`` and ``current`` differ in type.
        """
        if type(original) is not type(current):
            raise ConversionError(
                "Original and current entity must be of the same type.",
                details={
                    "original": type(original).__name__,
                    "current": type(current).__name__,
                },
            )
        context = DiffContext(original=original, lookup=lookup)
        return self._dumps(self._converter.to_payload(current, context), current)

    # ------------------------------------------------------------------ #
    # Dynamic views
    # ------------------------------------------------------------------ #

    def wrap_dynamic(self, text: str | bytes | None) -> DynamicJsonView:
        """Parse ``text`` into a :class:`DynamicJsonView`.

        Raises:
            ConversionError: If ``text`` is ``None`` or not valid JSON.
        """
        if text is None:
            raise ConversionError("Json is incorrect.", details={"error": "empty response"})
        return DynamicJsonView.parse(text)

    def wrap_dynamic_list(self, text: str | bytes | None) -> list[DynamicJsonView]:
        """Parse a JSON array into one view per non-null element.

        Raises:
            ConversionError: If ``text`` is not a JSON array.
        """
        root = self.wrap_dynamic(text)
        if not root.is_array:
            raise ConversionError(
                "Json is incorrect.",
                details={"error": "expected a JSON array", "excerpt": excerpt(str(root))},
            )
        items: Sequence[Any] = root.node
        return [DynamicJsonView(item) for item in items if item is not None]

    def dynamic_to_json(self, view: DynamicJsonView) -> str:
        """Serialize a dynamic view as compact JSON (legacy date encoding applied)."""
        return view.to_text(indented=False)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _dumps(payload: dict[str, Any] | None, entity: ExactEntity) -> str:
        try:
            return json.dumps(payload or {}, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise ConversionError(
                "Entity could not be serialized to JSON.",
                details={"entity": type(entity).__name__, "error": str(exc)},
            ) from exc

    @staticmethod
    def _conversion_error(
        message: str,
        *,
        entity_type: type[ExactEntity],
        text: str | bytes,
        exc: Exception,
    ) -> ConversionError:
        logger.debug(
            "entity_converter.decode_failed",
            extra={"extra": {"entity": entity_type.__name__, "errors": str(exc)}},
        )
        return ConversionError(
            message,
            details={
                "entity": entity_type.__name__,
                "error": str(exc),
                "excerpt": excerpt(_as_str(text)),
            },
        )
