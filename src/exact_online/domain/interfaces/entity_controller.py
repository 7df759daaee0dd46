# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Domain Interface: Entity controller lookup.

Synopsis:
    Change-tracking collaborator consulted by diff serialization. For a given
    entity instance it supplies the snapshot the entity was loaded with and
    whether the instance has been modified since.

Layer:
    domain/interfaces
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeAlias


class EntityController(Protocol):
    """Tracking state for a single entity instance."""

    @property
    def original_entity(self) -> Any:
        """Snapshot of the entity as last loaded from or saved to the API."""

    def is_updated(self, entity: Any) -> bool:
        """Return True when ``entity`` differs from :attr:`original_entity`."""


ControllerLookup: TypeAlias = Callable[[Any], EntityController | None]
"""Maps a current entity instance to its controller, or ``None`` if untracked."""
