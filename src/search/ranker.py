"""
Similarity Ranker

Ranks characters and locations together by cosine distance to a query
vector using pgvector's ``<=>`` operator on the unified ``entities`` table.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.common.storage import DATABASE_ERRORS
from src.common.telemetry import get_tracer
from src.exceptions import UpstreamCallFailure
from src.search.embedders import EMBEDDING_DIMENSION
from src.search.models import SearchResult
from src.search.vectors import require_dimension, to_pgvector

if TYPE_CHECKING:
    from asyncpg import Pool

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

# Equal distances are ordered by entity_type then id so results are repeatable.
RANK_SQL = """
SELECT
    id,
    entity_type,
    name,
    status,
    species,
    type,
    gender,
    image,
    location_name,
    location_type,
    dimension,
    embedding <=> $1::vector AS distance
FROM entities
WHERE embedding IS NOT NULL
ORDER BY embedding <=> $1::vector, entity_type, id
LIMIT $2
"""


class SimilarityRanker:
    """Nearest-neighbour lookup over both entity variants at once."""

    def __init__(self, pool: Pool, dimension: int = EMBEDDING_DIMENSION):
        self._pool = pool
        self._dimension = dimension

    async def rank(self, vector: list[float], limit: int) -> list[SearchResult]:
        """
        Return up to ``limit`` entities in ascending cosine distance.

        Args:
            vector: Query embedding, exactly ``dimension`` elements
            limit: Maximum number of results (>= 1)

        Returns:
            Results ordered by distance, then entity_type, then id

        Raises:
            DimensionMismatchError: If the vector has the wrong length
            ValueError: If limit is below 1
            UpstreamCallFailure: If the datastore query fails
        """
        require_dimension(vector, self._dimension)
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        with tracer.start_as_current_span("search.rank") as span:
            span.set_attribute("search.limit", limit)
            try:
                async with self._pool.acquire() as conn:
                    rows = await conn.fetch(RANK_SQL, to_pgvector(vector), limit)
            except DATABASE_ERRORS as e:
                logger.error(f"Similarity query failed: {e}")
                raise UpstreamCallFailure("datastore", str(e)) from e

            results = [SearchResult.from_row(row) for row in rows]
            span.set_attribute("search.result_count", len(results))
            return results
