# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Adapter Gateway: typed CRUD over one Exact Online endpoint.

This gateway sits on top of an :class:`ApiTransport` and provides:

* Paged and exhaustive reads decoded into typed entities.
* Single-entity reads by GUID key.
* Schema-free reads as :class:`DynamicJsonView` lists.
* Create (full payload), update (diff payload) and delete.

Design principles:
    * Every entity read or created through the gateway is registered with the
      :class:`ChangeTracker`, so later updates send only changed fields.
    * An update whose diff is ``{}`` issues no request.
    * Pagination follows ``$skiptoken`` continuation tokens until none is
      returned or the page cap is reached.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar
from uuid import UUID

from exact_online.adapters.mappers.dynamic_json import DynamicJsonView
from exact_online.adapters.mappers.entity_converter import EntitySerializer
from exact_online.adapters.mappers.envelope import EnvelopeCodec
from exact_online.application.schemas.odata_query import ODataQuery
from exact_online.application.services.change_tracker import ChangeTracker
from exact_online.config.settings import ExactSettings
from exact_online.domain.entities.base import NIL_ID, ExactEntity
from exact_online.domain.exceptions.tracking import EntityNotTracked
from exact_online.domain.interfaces.gateways.api_transport import ApiTransport

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ExactEntity)

_EMPTY_PAYLOAD = "{}"
_SKIP_TOKEN_PARAM = "$skiptoken"


class EntityGateway(Generic[T]):
    """Typed gateway for one entity endpoint (e.g. ``crm/Accounts``)."""

    def __init__(
        self,
        entity_type: type[T],
        endpoint: str,
        *,
        transport: ApiTransport,
        key_field: str = "id",
        serializer: EntitySerializer | None = None,
        codec: EnvelopeCodec | None = None,
        tracker: ChangeTracker | None = None,
        max_pages: int | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            entity_type: Entity model decoded from and encoded to this endpoint.
            endpoint: Endpoint path relative to the division root.
            transport: Raw-text executor.
            key_field: Name of the model field holding the GUID primary key.
            serializer: Entity serializer; a default instance if omitted.
            codec: Envelope codec; a default instance if omitted.
            tracker: Change tracker shared with other gateways of the same
                unit of work; a private tracker if omitted.
            max_pages: Default page cap for :meth:`get_all`.
        """
        if key_field not in entity_type.model_fields:
            raise ValueError(f"{entity_type.__name__} has no field named {key_field!r}.")
        self._entity_type = entity_type
        self._endpoint = endpoint.strip("/")
        self._transport = transport
        self._key_field = key_field
        self._serializer = serializer or EntitySerializer()
        self._codec = codec or EnvelopeCodec()
        self._tracker = tracker if tracker is not None else ChangeTracker()
        self._max_pages = max_pages

    @classmethod
    def from_settings(
        cls,
        entity_type: type[T],
        endpoint: str,
        *,
        transport: ApiTransport,
        settings: ExactSettings,
        **kwargs: Any,
    ) -> EntityGateway[T]:
        """Build a gateway whose default page cap comes from ``settings.max_pages``.

        Remaining keyword arguments are passed to the constructor unchanged.
        """
        return cls(entity_type, endpoint, transport=transport, max_pages=settings.max_pages, **kwargs)

    @property
    def tracker(self) -> ChangeTracker:
        return self._tracker

    # --------------------------------------------------------------------- #
    # Reads
    # --------------------------------------------------------------------- #
    async def get_page(
        self, query: ODataQuery | None = None, skip_token: str | None = None
    ) -> tuple[list[T], str | None]:
        """Fetch one page of entities.

        Args:
            query: Optional OData query options.
            skip_token: Continuation token returned by a previous page.

        Returns:
            The decoded (and tracked) entities and the next page token, or
            ``None`` when this was the last page.
        """
        text = await self._transport.get_text(self._endpoint, params=self._params(query, skip_token))
        entities = self._serializer.decode_list(self._entity_type, self._codec.unwrap_array(text))
        for entity in entities:
            self._tracker.track(entity)
        return entities, self._codec.extract_continuation_token(text)

    async def get(self, query: ODataQuery | None = None) -> list[T]:
        """Fetch the first page of entities."""
        entities, _ = await self.get_page(query)
        return entities

    async def get_all(
        self, query: ODataQuery | None = None, max_pages: int | None = None
    ) -> list[T]:
        """Fetch every page by following continuation tokens.

        Args:
            query: Optional OData query options.
            max_pages: Page cap overriding the gateway default; ``None`` means
                no cap.
        """
        limit = max_pages if max_pages is not None else self._max_pages
        collected: list[T] = []
        token: str | None = None
        pages = 0
        while True:
            entities, token = await self.get_page(query, token)
            collected.extend(entities)
            pages += 1
            if token is None:
                break
            if limit is not None and pages >= limit:
                logger.info(
                    "entity_gateway.page_cap_reached",
                    extra={"extra": {"endpoint": self._endpoint, "pages": pages}},
                )
                break
        return collected

    async def get_by_id(self, key: UUID | str, query: ODataQuery | None = None) -> T:
        """Fetch a single entity by its GUID key."""
        text = await self._transport.get_text(self._keyed(key), params=self._params(query, None))
        entity = self._serializer.decode(self._entity_type, self._codec.unwrap_object(text))
        self._tracker.track(entity)
        return entity

    async def get_dynamic(self, query: ODataQuery | None = None) -> list[DynamicJsonView]:
        """Fetch the first page as schema-free views (not tracked)."""
        text = await self._transport.get_text(self._endpoint, params=self._params(query, None))
        return self._serializer.wrap_dynamic_list(self._codec.unwrap_array(text))

    # --------------------------------------------------------------------- #
    # Writes
    # --------------------------------------------------------------------- #
    async def create(self, entity: T) -> T:
        """POST every writable field of ``entity`` and return the created entity.

        The returned instance carries server-assigned values (key, read-only
        fields) and is tracked for later updates.
        """
        text = await self._transport.post_text(self._endpoint, self._serializer.encode(entity))
        created = self._serializer.decode(self._entity_type, self._codec.unwrap_object(text))
        self._tracker.track(created)
        return created

    async def update(self, entity: T) -> bool:
        """PUT the fields of ``entity`` changed since it was loaded.

        Returns:
            True if a request was sent, False if nothing had changed.

        Raises:
            EntityNotTracked: If ``entity`` was not obtained through a tracked
                read or create.
        """
        original = self._tracker.original_of(entity)
        if original is None:
            raise EntityNotTracked(
                "Entity has no recorded original state.",
                details={"entity": type(entity).__name__, "endpoint": self._endpoint},
            )
        body = self._serializer.encode_diff(original, entity, self._tracker.lookup)
        if body == _EMPTY_PAYLOAD:
            logger.debug(
                "entity_gateway.update_skipped",
                extra={"extra": {"endpoint": self._endpoint}},
            )
            return False
        await self._transport.put_text(self._keyed(self._key_of(entity)), body)
        self._tracker.accept(entity)
        return True

    async def delete(self, entity: T) -> None:
        """DELETE ``entity`` and stop tracking it."""
        await self._transport.delete(self._keyed(self._key_of(entity)))
        self._tracker.forget(entity)

    # --------------------------------------------------------------------- #
    # Private helpers
    # --------------------------------------------------------------------- #
    def _key_of(self, entity: ExactEntity) -> UUID | str:
        key = getattr(entity, self._key_field)
        if key is None or key == NIL_ID or key == "":
            raise ValueError(f"{type(entity).__name__}.{self._key_field} is not set.")
        return key

    def _keyed(self, key: UUID | str) -> str:
        return f"{self._endpoint}(guid'{key}')"

    @staticmethod
    def _params(query: ODataQuery | None, skip_token: str | None) -> dict[str, Any]:
        params: dict[str, Any] = dict(query.to_params()) if query is not None else {}
        if skip_token:
            params[_SKIP_TOKEN_PARAM] = skip_token
        return params

