# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Service: entity change tracking.

Purpose:
    Remember the state each entity had when it was loaded from (or last saved
    to) the API so updates can be serialized as a minimal diff. The tracker's
    :meth:`ChangeTracker.lookup` is the controller lookup consumed by
    :class:`~exact_online.adapters.mappers.diff_converter.DiffConverter` for
    nested collections.

Layer:
    application/services

Notes:
    - Entities are keyed by object identity. The tracker holds a strong
      reference to every tracked instance so identities are never reused
      while an entry exists; call :meth:`ChangeTracker.forget` to release.
    - "Updated" means a writable field differs from the snapshot; read-only
      fields never count as changes.
    - Not thread-safe; use one tracker per unit of work.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from exact_online.domain.entities.base import ExactEntity

__all__ = ["ChangeTracker", "EntityController"]


class EntityController:
    """Original snapshot and change check for one entity instance."""

    def __init__(self, entity: ExactEntity) -> None:
        """Capture a deep copy of ``entity`` as the original state."""
        self._original = entity.model_copy(deep=True)

    @property
    def original_entity(self) -> ExactEntity:
        return self._original

    def is_updated(self, entity: ExactEntity) -> bool:
        """Return True when a writable field of ``entity`` differs from the snapshot."""
        return _writable_state(entity) != _writable_state(self._original)

    def accept(self, entity: ExactEntity) -> None:
        """Re-baseline the snapshot after ``entity`` was saved."""
        self._original = entity.model_copy(deep=True)


class ChangeTracker:
    """Registry of :class:`EntityController` objects keyed by entity identity."""

    def __init__(self) -> None:
        self._entries: dict[int, tuple[ExactEntity, EntityController]] = {}

    def track(self, entity: ExactEntity) -> EntityController:
        """Start tracking ``entity`` and its nested collection items.

        Tracking an already tracked instance returns its existing controller
        and keeps the original snapshot.
        """
        existing = self.lookup(entity)
        if existing is not None:
            return existing
        controller = EntityController(entity)
        self._entries[id(entity)] = (entity, controller)
        for item in _nested_items(entity):
            self.track(item)
        return controller

    def lookup(self, entity: object) -> EntityController | None:
        """Return the controller of ``entity``, or ``None`` if it is untracked."""
        entry = self._entries.get(id(entity))
        if entry is None or entry[0] is not entity:
            return None
        return entry[1]

    def original_of(self, entity: ExactEntity) -> ExactEntity | None:
        """Return the original snapshot of ``entity``, if tracked."""
        controller = self.lookup(entity)
        return controller.original_entity if controller is not None else None

    def accept(self, entity: ExactEntity) -> None:
        """Mark ``entity`` (and its nested items) as saved in its current state."""
        controller = self.lookup(entity)
        if controller is None:
            self.track(entity)
            return
        controller.accept(entity)
        for item in _nested_items(entity):
            self.accept(item)

    def forget(self, entity: ExactEntity) -> None:
        """Stop tracking ``entity`` and its nested items."""
        if self.lookup(entity) is None:
            return
        del self._entries[id(entity)]
        for item in _nested_items(entity):
            self.forget(item)

    def __contains__(self, entity: object) -> bool:
        return self.lookup(entity) is not None

    def __len__(self) -> int:
        return len(self._entries)


def _nested_items(entity: ExactEntity) -> Iterator[ExactEntity]:
    for descriptor in type(entity).field_descriptors():
        if descriptor.is_collection:
            yield from getattr(entity, descriptor.name) or ()


def _writable_state(entity: ExactEntity) -> tuple[Any, ...]:
    state: list[Any] = []
    for descriptor in type(entity).field_descriptors():
        if not descriptor.writable:
            continue
        value = getattr(entity, descriptor.name)
        if descriptor.is_collection:
            value = tuple(_writable_state(item) for item in value or ())
        state.append((descriptor.name, value))
    return tuple(state)
