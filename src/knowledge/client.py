"""
Knowledge Graph Client

Read-only GraphQL client for character and location records.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from src.common.telemetry import get_tracer, trace_async
from src.exceptions import EntityNotFoundError, UpstreamCallFailure
from src.knowledge import queries
from src.knowledge.models import CharacterPage, CharacterRecord, LocationPage, LocationRecord

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

SERVICE = "knowledge_graph"


class KnowledgeGraphClient:
    """
    Async GraphQL reader over a shared httpx.AsyncClient.

    The HTTP client is owned by the caller; timeouts are configured on it.
    """

    def __init__(self, http: httpx.AsyncClient, url: str):
        self._http = http
        self._url = url

    async def _query(self, document: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Post a GraphQL document and return its ``data`` object."""
        with tracer.start_as_current_span("knowledge.query") as span:
            span.set_attribute("knowledge.variables", str(variables))
            try:
                response = await self._http.post(
                    self._url, json={"query": document, "variables": variables}
                )
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPStatusError as e:
                raise UpstreamCallFailure(SERVICE, f"HTTP {e.response.status_code}") from e
            except httpx.HTTPError as e:
                raise UpstreamCallFailure(SERVICE, str(e) or type(e).__name__) from e
            except ValueError as e:
                raise UpstreamCallFailure(SERVICE, f"invalid JSON response: {e}") from e

            if not isinstance(payload, dict):
                raise UpstreamCallFailure(SERVICE, f"unexpected response shape: {type(payload).__name__}")
            errors = payload.get("errors")
            if errors:
                if not isinstance(errors, list):
                    errors = [errors]
                messages = "; ".join(
                    str(err.get("message", "unknown error")) if isinstance(err, dict) else str(err) for err in errors
                )
                raise UpstreamCallFailure(SERVICE, messages)
            data = payload.get("data")
            return data if isinstance(data, dict) else {}

    @trace_async("knowledge.get_character", arguments={"character_id": "knowledge.character_id"})
    async def get_character(self, character_id: int) -> CharacterRecord:
        """
        Fetch one character with origin, location and episodes.

        Raises:
            EntityNotFoundError: If the graph has no character with this id
            UpstreamCallFailure: On transport, HTTP or GraphQL errors
        """
        data = await self._query(queries.GET_CHARACTER, {"id": character_id})
        record = data.get("character")
        if not record:
            raise EntityNotFoundError("character", character_id)
        return _validate(CharacterRecord, record)

    @trace_async("knowledge.get_location", arguments={"location_id": "knowledge.location_id"})
    async def get_location(self, location_id: int) -> LocationRecord:
        """
        Fetch one location with its residents.

        Raises:
            EntityNotFoundError: If the graph has no location with this id
            UpstreamCallFailure: On transport, HTTP or GraphQL errors
        """
        data = await self._query(queries.GET_LOCATION, {"id": location_id})
        record = data.get("location")
        if not record:
            raise EntityNotFoundError("location", location_id)
        return _validate(LocationRecord, record)

    async def list_characters(self, page: int = 1) -> CharacterPage:
        data = await self._query(queries.LIST_CHARACTERS, {"page": page})
        return _validate(CharacterPage, data.get("characters") or {"info": {}})

    async def list_locations(self, page: int = 1) -> LocationPage:
        data = await self._query(queries.LIST_LOCATIONS, {"page": page})
        return _validate(LocationPage, data.get("locations") or {"info": {}})

    async def iter_characters(self) -> AsyncIterator[CharacterRecord]:
        """Yield every character, following page links until there is no next page."""
        page: int | None = 1
        while page is not None:
            result = await self.list_characters(page)
            logger.info(f"Fetched character page {page}: {len(result.results)} characters")
            for record in result.results:
                yield record
            page = result.info.next

    async def iter_locations(self) -> AsyncIterator[LocationRecord]:
        """Yield every location, following page links until there is no next page."""
        page: int | None = 1
        while page is not None:
            result = await self.list_locations(page)
            logger.info(f"Fetched location page {page}: {len(result.results)} locations")
            for record in result.results:
                yield record
            page = result.info.next


def _validate(model: Any, data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise UpstreamCallFailure(SERVICE, f"unexpected {model.__name__} shape: {e}") from e
