"""Tests for SimilarityRanker and the pgvector helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from src.exceptions import DimensionMismatchError, UpstreamCallFailure
from src.search.models import EntityVariant
from src.search.ranker import RANK_SQL, SimilarityRanker
from src.search.vectors import require_dimension, to_pgvector


def _row(entity_id, entity_type, name, distance, **extra):
    row = {
        "id": entity_id,
        "entity_type": entity_type,
        "name": name,
        "status": None,
        "species": None,
        "type": None,
        "gender": None,
        "image": None,
        "location_name": None,
        "location_type": None,
        "dimension": None,
        "distance": distance,
    }
    row.update(extra)
    return row


@pytest.fixture
def mock_pool():
    """Create a mock connection pool."""
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__ = AsyncMock(return_value=conn)
    pool.acquire.return_value.__aexit__ = AsyncMock(return_value=None)
    return pool, conn


# =============================================================================
# Vector Helpers
# =============================================================================


class TestVectors:
    def test_to_pgvector_literal(self):
        assert to_pgvector([0.5, 1, -2.25]) == "[0.5,1.0,-2.25]"

    def test_require_dimension_rejects_wrong_length(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            require_dimension([0.0] * 767, 768)
        assert exc_info.value.expected == 768
        assert exc_info.value.actual == 767

    def test_require_dimension_accepts_exact_length(self):
        require_dimension([0.0] * 768, 768)


# =============================================================================
# Ranking
# =============================================================================


class TestSimilarityRanker:
    @pytest.mark.asyncio
    async def test_rank_returns_merged_results_in_order(self, mock_pool):
        pool, conn = mock_pool
        conn.fetch.return_value = [
            _row(1, "character", "Rick Sanchez", 0.12, status="Alive", species="Human", location_name="Citadel"),
            _row(3, "location", "Citadel of Ricks", 0.18, location_type="Space station", dimension="unknown"),
            _row(2, "character", "Morty Smith", 0.31, status="Alive", species="Human"),
        ]
        ranker = SimilarityRanker(pool, dimension=4)

        results = await ranker.rank([0.1, 0.2, 0.3, 0.4], limit=6)

        conn.fetch.assert_awaited_once_with(RANK_SQL, "[0.1,0.2,0.3,0.4]", 6)
        assert [r.entity.name for r in results] == ["Rick Sanchez", "Citadel of Ricks", "Morty Smith"]
        assert [r.entity.variant for r in results] == [
            EntityVariant.CHARACTER,
            EntityVariant.LOCATION,
            EntityVariant.CHARACTER,
        ]
        distances = [r.distance for r in results]
        assert distances == sorted(distances)

    @pytest.mark.asyncio
    async def test_result_projection_is_tagged(self, mock_pool):
        pool, conn = mock_pool
        conn.fetch.return_value = [
            _row(3, "location", "Citadel of Ricks", 0.2, location_type="Space station", dimension="unknown")
        ]
        ranker = SimilarityRanker(pool, dimension=2)

        [result] = await ranker.rank([1.0, 0.0], limit=1)

        assert result.to_dict() == {
            "id": 3,
            "name": "Citadel of Ricks",
            "variant": "location",
            "location_type": "Space station",
            "dimension": "unknown",
            "distance": 0.2,
        }

    def test_query_orders_ties_by_type_then_id(self):
        assert "ORDER BY embedding <=> $1::vector, entity_type, id" in RANK_SQL
        assert "embedding IS NOT NULL" in RANK_SQL

    @pytest.mark.asyncio
    async def test_wrong_dimension_rejected_before_query(self, mock_pool):
        pool, conn = mock_pool
        ranker = SimilarityRanker(pool, dimension=768)

        with pytest.raises(DimensionMismatchError):
            await ranker.rank([0.1] * 10, limit=6)
        conn.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_limit_below_one_rejected(self, mock_pool):
        pool, _ = mock_pool
        ranker = SimilarityRanker(pool, dimension=2)

        with pytest.raises(ValueError):
            await ranker.rank([0.1, 0.2], limit=0)

    @pytest.mark.asyncio
    async def test_database_error_is_upstream_failure(self, mock_pool):
        pool, conn = mock_pool
        conn.fetch.side_effect = asyncpg.PostgresError("relation \"entities\" does not exist")
        ranker = SimilarityRanker(pool, dimension=2)

        with pytest.raises(UpstreamCallFailure) as exc_info:
            await ranker.rank([0.1, 0.2], limit=3)
        assert exc_info.value.service == "datastore"
