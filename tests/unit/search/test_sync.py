"""Tests for EntitySync."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.exceptions import UpstreamCallFailure
from src.search.sync import EntitySync


def _aiter(items):
    async def gen():
        for item in items:
            yield item

    return gen()


@pytest.fixture
def knowledge(rick, birdperson, citadel):
    client = MagicMock()
    client.iter_characters = MagicMock(side_effect=lambda: _aiter([rick, birdperson]))
    client.iter_locations = MagicMock(side_effect=lambda: _aiter([citadel]))
    return client


@pytest.fixture
def embedder():
    emb = MagicMock()
    emb.dimension = 4
    emb.embed = AsyncMock(return_value=[0.1, 0.2, 0.3, 0.4])
    return emb


@pytest.fixture
def index():
    idx = MagicMock()
    idx.upsert = AsyncMock()
    return idx


class TestEntitySync:
    @pytest.mark.asyncio
    async def test_stores_every_entity(self, knowledge, embedder, index):
        report = await EntitySync(knowledge, embedder, index).run()

        assert report.characters_stored == 2
        assert report.locations_stored == 1
        assert report.missing_embeddings == 0
        assert report.failed == 0
        assert index.upsert.await_count == 3

    @pytest.mark.asyncio
    async def test_image_description_feeds_embedding_text(self, knowledge, embedder, index):
        vision = MagicMock()
        vision.describe = AsyncMock(return_value="Spiky grey hair")

        await EntitySync(knowledge, embedder, index, vision=vision).run(locations=False)

        # Birdperson has no image
        vision.describe.assert_awaited_once()
        first_text = embedder.embed.await_args_list[0].args[0]
        assert "Visual Appearance: Spiky grey hair" in first_text

    @pytest.mark.asyncio
    async def test_vision_failure_does_not_block_storage(self, knowledge, embedder, index):
        vision = MagicMock()
        vision.describe = AsyncMock(side_effect=UpstreamCallFailure("vision", "bad image"))

        report = await EntitySync(knowledge, embedder, index, vision=vision).run(locations=False)

        assert report.characters_stored == 2

    @pytest.mark.asyncio
    async def test_embedding_failure_stores_without_vector(self, knowledge, embedder, index):
        embedder.embed.side_effect = UpstreamCallFailure("embedding", "quota")

        report = await EntitySync(knowledge, embedder, index).run()

        assert report.missing_embeddings == 3
        assert report.characters_stored == 2
        assert all(call.args[1] is None for call in index.upsert.await_args_list)

    @pytest.mark.asyncio
    async def test_short_vector_stored_without_embedding(self, knowledge, embedder, index):
        embedder.embed.return_value = [0.1, 0.2]

        report = await EntitySync(knowledge, embedder, index).run(characters=False)

        assert report.missing_embeddings == 1
        assert index.upsert.await_args.args[1] is None

    @pytest.mark.asyncio
    async def test_upsert_failure_is_counted_not_fatal(self, knowledge, embedder, index):
        index.upsert.side_effect = [UpstreamCallFailure("datastore", "down"), None, None]

        report = await EntitySync(knowledge, embedder, index).run()

        assert report.failures == ["character 1 (Rick Sanchez)"]
        assert report.characters_stored == 1
        assert report.locations_stored == 1
