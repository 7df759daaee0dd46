# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Base Entity (Domain Layer).

Purpose:
    Pydantic base for typed API entities plus the per-type field descriptor
    table used by the serializers.

Layer:
    domain/entities

Notes:
    - Descriptors are built once per entity class when the class is created
      (or on first use when the class still has unresolved forward
      references) and are never recomputed per call.
    - The wire name of a field is its pydantic alias; read-only fields carry
      ``json_schema_extra={"readOnly": True}`` (see :func:`read_only_field`).
    - Fields typed as ``datetime`` accept both ISO-8601 text and the legacy
      ``/Date(ms)/`` token on read.
"""

from __future__ import annotations

import types
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Final, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.fields import FieldInfo

from exact_online.domain.services.legacy_date import parse_timestamp

__all__ = [
    "NIL_ID",
    "READ_ONLY_KEY",
    "ExactEntity",
    "FieldDescriptor",
    "read_only_field",
]

NIL_ID: Final[UUID] = UUID(int=0)
READ_ONLY_KEY: Final[str] = "readOnly"


def read_only_field(alias: str | None = None, default: Any = None) -> Any:
    """Declare a field the remote API computes and never accepts on write.

    Args:
        alias: Wire name of the field.
        default: Default value when the field is absent from the payload.

    Returns:
        A pydantic ``FieldInfo`` marked read-only.
    """
    return Field(default, alias=alias, json_schema_extra={READ_ONLY_KEY: True})


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Serialization metadata for one entity field.

    Attributes:
        name: Python attribute name.
        wire_name: JSON member name on the wire.
        writable: False for fields marked read-only.
        is_collection: True when the field holds a sequence of nested entities.
        item_type: Entity class of the collection items (collections only).
        is_timestamp: True when the field is typed as ``datetime``.
        is_entity: True when the field holds a single nested entity.
    """

    name: str
    wire_name: str
    writable: bool = True
    is_collection: bool = False
    item_type: type[ExactEntity] | None = None
    is_timestamp: bool = False
    is_entity: bool = False


def _strip_optional(annotation: Any) -> Any:
    """Return ``X`` for ``X | None`` annotations, otherwise ``annotation``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_entity_type(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, ExactEntity)


def _describe(name: str, info: FieldInfo) -> FieldDescriptor:
    annotation = _strip_optional(info.annotation)
    extra = info.json_schema_extra
    writable = not (isinstance(extra, dict) and extra.get(READ_ONLY_KEY) is True)

    item_type: type[ExactEntity] | None = None
    origin = get_origin(annotation)
    if origin is not None and isinstance(origin, type) and issubclass(origin, Sequence):
        args = get_args(annotation)
        if args and _is_entity_type(args[0]):
            item_type = args[0]

    return FieldDescriptor(
        name=name,
        wire_name=info.alias or name,
        writable=writable,
        is_collection=item_type is not None,
        item_type=item_type,
        is_timestamp=annotation is datetime,
        is_entity=_is_entity_type(annotation),
    )


class ExactEntity(BaseModel):
    """Base class for typed API entities.

    Subclasses declare fields in wire order with pydantic aliases for the wire
    names. Instances are mutable so callers can edit the current state of an
    entity and later send only the changed fields.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    __entity_fields__: ClassVar[tuple[FieldDescriptor, ...] | None] = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if cls.__pydantic_complete__:
            cls.__entity_fields__ = cls._build_descriptors()

    @classmethod
    def _build_descriptors(cls) -> tuple[FieldDescriptor, ...]:
        return tuple(_describe(name, info) for name, info in cls.model_fields.items())

    @classmethod
    def field_descriptors(cls) -> tuple[FieldDescriptor, ...]:
        """Return the descriptor table for this entity type, in declaration order."""
        descriptors = cls.__dict__.get("__entity_fields__")
        if descriptors is None:
            if not cls.__pydantic_complete__:
                cls.model_rebuild()
            descriptors = cls._build_descriptors()
            cls.__entity_fields__ = descriptors
        return descriptors

    @field_validator("*", mode="before")
    @classmethod
    def _decode_timestamps(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, str):
            return value
        for descriptor in cls.field_descriptors():
            if descriptor.name == info.field_name and descriptor.is_timestamp:
                return parse_timestamp(value)
        return value
