"""Tests for KnowledgeGraphClient against a mocked GraphQL transport."""

from __future__ import annotations

import json

import httpx
import pytest

from src.exceptions import EntityNotFoundError, UpstreamCallFailure
from src.knowledge import queries
from src.knowledge.client import KnowledgeGraphClient

URL = "https://rickandmortyapi.com/graphql"


def _client(handler) -> KnowledgeGraphClient:
    return KnowledgeGraphClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)), URL)


def _character(character_id, name):
    return {
        "id": str(character_id),
        "name": name,
        "status": None,
        "species": "Human",
        "type": None,
        "gender": "Male",
        "image": None,
        "origin": None,
        "location": {"id": "20", "name": "Earth (Replacement Dimension)", "type": "Planet", "dimension": None},
        "episode": [],
    }


class TestGetCharacter:
    @pytest.mark.asyncio
    async def test_posts_query_and_parses_record(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content))
            return httpx.Response(200, json={"data": {"character": _character(2, "Morty Smith")}})

        record = await _client(handler).get_character(2)

        assert seen == {"query": queries.GET_CHARACTER, "variables": {"id": 2}}
        assert record.id == 2
        assert record.status == "Unknown"
        assert record.type == ""
        assert record.origin_name == "Unknown"
        assert record.location_name == "Earth (Replacement Dimension)"

    @pytest.mark.asyncio
    async def test_null_record_is_not_found(self):
        client = _client(lambda request: httpx.Response(200, json={"data": {"character": None}}))

        with pytest.raises(EntityNotFoundError) as exc_info:
            await client.get_character(9999)
        assert exc_info.value.entity_id == 9999
        assert str(exc_info.value) == "[ENTITY_NOT_FOUND] Character with id 9999 not found"

    @pytest.mark.asyncio
    async def test_graphql_errors_are_upstream_failures(self):
        client = _client(
            lambda request: httpx.Response(200, json={"errors": [{"message": "Syntax Error"}], "data": None})
        )

        with pytest.raises(UpstreamCallFailure, match="Syntax Error"):
            await client.get_character(1)

    @pytest.mark.asyncio
    async def test_http_status_is_upstream_failure(self):
        client = _client(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(UpstreamCallFailure, match="HTTP 503"):
            await client.get_character(1)

    @pytest.mark.asyncio
    async def test_transport_error_is_upstream_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamCallFailure) as exc_info:
            await _client(handler).get_character(1)
        assert exc_info.value.service == "knowledge_graph"

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_upstream_failure(self):
        client = _client(lambda request: httpx.Response(200, json={"data": {"character": {"id": "x"}}}))

        with pytest.raises(UpstreamCallFailure, match="CharacterRecord"):
            await client.get_character(1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["oops"], "oops", 42])
    async def test_non_object_body_is_upstream_failure(self, body):
        client = _client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(UpstreamCallFailure, match="unexpected response shape"):
            await client.get_character(1)

    @pytest.mark.asyncio
    async def test_malformed_errors_list_is_upstream_failure(self):
        client = _client(lambda request: httpx.Response(200, json={"errors": ["rate limited"]}))

        with pytest.raises(UpstreamCallFailure, match="rate limited"):
            await client.get_character(1)


class TestGetLocation:
    @pytest.mark.asyncio
    async def test_location_with_residents(self):
        payload = {
            "id": "3",
            "name": "Citadel of Ricks",
            "type": "Space station",
            "dimension": "unknown",
            "residents": [
                {
                    "id": "8",
                    "name": "Adjudicator Rick",
                    "status": "Dead",
                    "species": "Human",
                    "type": "",
                    "gender": "Male",
                    "origin": {"name": "unknown"},
                    "location": {"name": "Citadel of Ricks"},
                }
            ],
        }
        client = _client(lambda request: httpx.Response(200, json={"data": {"location": payload}}))

        record = await client.get_location(3)

        assert record.residents[0].name == "Adjudicator Rick"
        assert record.residents[0].location.name == "Citadel of Ricks"

    @pytest.mark.asyncio
    async def test_missing_location_is_not_found(self):
        client = _client(lambda request: httpx.Response(200, json={"data": {"location": None}}))
        with pytest.raises(EntityNotFoundError):
            await client.get_location(500)


class TestPagination:
    @pytest.mark.asyncio
    async def test_iter_characters_follows_next_page(self):
        pages = {
            1: {"info": {"count": 3, "pages": 2, "next": 2, "prev": None}, "results": [_character(1, "Rick"), _character(2, "Morty")]},
            2: {"info": {"count": 3, "pages": 2, "next": None, "prev": 1}, "results": [_character(3, "Summer")]},
        }

        def handler(request):
            page = json.loads(request.content)["variables"]["page"]
            return httpx.Response(200, json={"data": {"characters": pages[page]}})

        names = [record.name async for record in _client(handler).iter_characters()]

        assert names == ["Rick", "Morty", "Summer"]

    @pytest.mark.asyncio
    async def test_iter_locations_single_page(self):
        def handler(request):
            return httpx.Response(
                200,
                json={
                    "data": {
                        "locations": {
                            "info": {"count": 1, "pages": 1, "next": None},
                            "results": [{"id": "1", "name": "Earth (C-137)", "type": "Planet", "dimension": "C-137", "residents": []}],
                        }
                    }
                },
            )

        records = [record async for record in _client(handler).iter_locations()]

        assert [r.name for r in records] == ["Earth (C-137)"]
