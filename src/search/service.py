"""
Semantic Search Service

Composes the three search stages: enhance the query, embed it, rank
entities by similarity. Stages run sequentially since each consumes the
previous result.
"""

from __future__ import annotations

import logging
import time

from src.common.telemetry import get_lens_metrics, get_tracer
from src.search.embedders import Embedder
from src.search.enhancer import QueryEnhancer
from src.search.models import SearchResponse
from src.search.ranker import SimilarityRanker

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DEFAULT_LIMIT = 6


class SemanticSearchService:
    def __init__(
        self,
        enhancer: QueryEnhancer,
        embedder: Embedder,
        ranker: SimilarityRanker,
        default_limit: int = DEFAULT_LIMIT,
    ):
        self._enhancer = enhancer
        self._embedder = embedder
        self._ranker = ranker
        self._default_limit = default_limit

    async def search(self, query: str, limit: int | None = None) -> SearchResponse:
        """
        Search characters and locations for a natural-language query.

        Args:
            query: Caller text (validated non-empty at the boundary)
            limit: Maximum results, defaults to the configured limit

        Returns:
            SearchResponse with results in ascending distance

        Raises:
            UpstreamCallFailure: From query expansion, embedding or the datastore
            ExtractionFailure: If the embedding response holds no array
        """
        if limit is None:
            limit = self._default_limit
        start = time.perf_counter()
        with tracer.start_as_current_span("search.query") as span:
            span.set_attribute("search.query_length", len(query))
            span.set_attribute("search.limit", limit)

            enhanced = await self._enhancer.enhance(query)
            vector = await self._embedder.embed(enhanced)
            results = await self._ranker.rank(vector, limit)

            span.set_attribute("search.result_count", len(results))
            logger.info(f'Found {len(results)} results for "{query}"')

        get_lens_metrics().record_search(
            duration_ms=(time.perf_counter() - start) * 1000,
            result_count=len(results),
            enhanced=enhanced != query,
        )
        return SearchResponse(
            query=query,
            results=results,
            enhanced_query=enhanced if enhanced != query else None,
        )
