# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Field-level entity writer with optional change diffing.

Purpose:
    Turn a typed entity into the JSON member mapping sent to the API. In full
    mode every writable field is emitted; in diff mode only the fields that
    differ from an original snapshot are emitted, so an update never
    overwrites values the caller did not touch.

Layer:
    adapters/mappers

Rules:
    1. Read-only fields are never written.
    2. Fields holding the nil UUID are never written, in either mode; an unset
       identifier must not reach the remote system.
    3. Diff mode compares scalars with ``None`` mapped to ``"null"`` on both
       sides. Nested entity collections are included when any item is
       untracked (no controller) or reported as updated by its controller.
    4. Timestamps are written as ``YYYY-MM-DDTHH:MM`` (UTC).
    5. Each collection item is written with its own context: its controller's
       original snapshot, or a default instance of the item type when the item
       is untracked. Items that produce no members are dropped, and the field
       is dropped when no item remains.
    6. Members follow field declaration order; omitted fields produce no key.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Final
from uuid import UUID

from exact_online.domain.entities.base import NIL_ID, ExactEntity, FieldDescriptor
from exact_online.domain.interfaces.entity_controller import ControllerLookup
from exact_online.domain.services.legacy_date import format_edm_datetime

__all__ = ["FULL_CONTEXT", "DiffContext", "DiffConverter"]

_NULL: Final[str] = "null"


@dataclass(frozen=True, slots=True)
class DiffContext:
    """Serialization context passed down the recursive write.

    Attributes:
        original: Snapshot to diff against; ``None`` selects full mode.
        lookup: Controller lookup for nested collection items.
    """

    original: ExactEntity | None = None
    lookup: ControllerLookup | None = None

    @property
    def diff_mode(self) -> bool:
        return self.original is not None

    def for_item(self, item: ExactEntity) -> DiffContext:
        """Derive the context used to write a nested ``item``."""
        if not self.diff_mode:
            return FULL_CONTEXT
        controller = self.lookup(item) if self.lookup is not None else None
        if controller is not None:
            return DiffContext(original=controller.original_entity, lookup=self.lookup)
        return DiffContext(original=type(item).model_construct(), lookup=self.lookup)


FULL_CONTEXT: Final[DiffContext] = DiffContext()


def _or_null(value: Any) -> Any:
    return _NULL if value is None else value


class DiffConverter:
    """Builds wire payloads for entities according to a :class:`DiffContext`."""

    def to_payload(
        self, entity: ExactEntity, context: DiffContext = FULL_CONTEXT
    ) -> dict[str, Any] | None:
        """Return the members to send for ``entity``.

        Args:
            entity: Entity in its current state.
            context: Full mode (default) or diff mode with an original.

        Returns:
            Ordered mapping of wire name to JSON-ready value, or ``None`` when
            no field qualifies.
        """
        payload: dict[str, Any] = {}
        for descriptor in type(entity).field_descriptors():
            if not descriptor.writable:
                continue
            value = getattr(entity, descriptor.name)
            if isinstance(value, UUID) and value == NIL_ID:
                continue
            if context.diff_mode and not self._is_changed(descriptor, value, context):
                continue
            if descriptor.is_collection:
                items = self._collection_payload(value or (), context)
                if items:
                    payload[descriptor.wire_name] = items
                continue
            payload[descriptor.wire_name] = self._to_wire(value, context)
        return payload or None

    def _is_changed(self, descriptor: FieldDescriptor, value: Any, context: DiffContext) -> bool:
        if descriptor.is_collection and context.lookup is not None:
            for item in value or ():
                controller = context.lookup(item)
                if controller is None or controller.is_updated(item):
                    return True
            return False
        original_value = getattr(context.original, descriptor.name, None)
        return bool(_or_null(original_value) != _or_null(value))

    def _collection_payload(
        self, items: Iterable[ExactEntity], context: DiffContext
    ) -> list[dict[str, Any]]:
        written: list[dict[str, Any]] = []
        for item in items:
            item_payload = self.to_payload(item, context.for_item(item))
            if item_payload is not None:
                written.append(item_payload)
        return written

    def _to_wire(self, value: Any, context: DiffContext) -> Any:
        if value is None or isinstance(value, str | bool | int | float):
            return value
        if isinstance(value, datetime):
            return format_edm_datetime(value)
        if isinstance(value, ExactEntity):
            return self.to_payload(value, context.for_item(value)) or {}
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, list | tuple):
            return [self._to_wire(item, context) for item in value]
        if isinstance(value, dict):
            return {key: self._to_wire(item, context) for key, item in value.items()}
        return value
