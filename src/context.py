"""
Application Context

Wires configuration, clients and services together. Components are built on
first use so that a command only needs the credentials it actually touches:
``extract`` needs none, ``describe`` needs the generation key, ``search``
needs the datastore and the embedding key.

Usage:
    async with open_context(database=True) as ctx:
        response = await ctx.search.search("portal gun")
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import cached_property
from typing import TYPE_CHECKING

import httpx

from src.common.storage import StorageConfig, close_pool, create_pool
from src.config import LoadedConfig, load_config
from src.content import CompatibilityService, DescriptionService, EvaluationService, InsightsService
from src.exceptions import ConfigurationError
from src.extraction import InsightSynthesizer, StructuredExtractor
from src.knowledge import KnowledgeGraphClient
from src.llm import ChatCompletionProvider, TextGenerator, VisionAnalyzer, create_generation_client
from src.search import (
    EntityIndex,
    EntitySync,
    QueryEnhancer,
    SemanticSearchService,
    SimilarityRanker,
    create_embedder,
)

if TYPE_CHECKING:
    import asyncpg
    from openai import AsyncOpenAI

    from src.search import Embedder

logger = logging.getLogger(__name__)


class AppContext:
    """Lazily constructed service graph for one process."""

    def __init__(
        self,
        config: LoadedConfig,
        http: httpx.AsyncClient,
        pool: asyncpg.Pool | None = None,
    ):
        self.config = config
        self.http = http
        self.pool = pool

    @property
    def settings(self):
        return self.config.settings

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    @cached_property
    def llm_client(self) -> AsyncOpenAI:
        return create_generation_client(self.settings)

    @cached_property
    def knowledge(self) -> KnowledgeGraphClient:
        return KnowledgeGraphClient(self.http, self.settings.knowledge_graph_url)

    @cached_property
    def generator(self) -> TextGenerator:
        return TextGenerator(ChatCompletionProvider(self.llm_client), self.config.templates)

    @cached_property
    def vision(self) -> VisionAnalyzer:
        return VisionAnalyzer(
            self.llm_client,
            model=self.settings.vision_model,
            max_tokens=self.settings.vision_max_tokens,
        )

    @cached_property
    def embedder(self) -> Embedder:
        return create_embedder(self.settings)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise ConfigurationError("This command requires the vector datastore")
        return self.pool

    @cached_property
    def index(self) -> EntityIndex:
        return EntityIndex(self._require_pool(), self.settings.embedding_dimension)

    @cached_property
    def search(self) -> SemanticSearchService:
        return SemanticSearchService(
            enhancer=QueryEnhancer(self.generator),
            embedder=self.embedder,
            ranker=SimilarityRanker(self._require_pool(), self.settings.embedding_dimension),
            default_limit=self.settings.search_default_limit,
        )

    def sync(self, analyze_images: bool | None = None) -> EntitySync:
        if analyze_images is None:
            analyze_images = self.settings.sync_analyze_images
        return EntitySync(
            self.knowledge,
            self.embedder,
            self.index,
            vision=self.vision if analyze_images else None,
        )

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    @cached_property
    def extractor(self) -> StructuredExtractor:
        return StructuredExtractor(
            synthesizer=InsightSynthesizer(),
            insight_count=self.settings.insight_count,
        )

    @cached_property
    def descriptions(self) -> DescriptionService:
        return DescriptionService(self.knowledge, self.generator, self.vision)

    @cached_property
    def insights(self) -> InsightsService:
        return InsightsService(
            self.knowledge,
            self.generator,
            self.extractor,
            vision=self.vision,
            count=self.settings.insight_count,
        )

    @cached_property
    def compatibility(self) -> CompatibilityService:
        return CompatibilityService(self.knowledge, self.generator, self.extractor, self.vision)

    @cached_property
    def evaluation(self) -> EvaluationService:
        return EvaluationService(self.knowledge, self.generator, self.extractor, self.vision)

    async def aclose(self) -> None:
        """Release the clients that were actually created."""
        if "llm_client" in self.__dict__:
            await self.llm_client.close()
        await self.http.aclose()
        await close_pool(self.pool)


@asynccontextmanager
async def open_context(
    config: LoadedConfig | None = None,
    *,
    database: bool = False,
    storage: StorageConfig | None = None,
) -> AsyncIterator[AppContext]:
    """
    Build an AppContext and close its resources on exit.

    Args:
        config: Preloaded configuration (loaded from the environment if None)
        database: Open the asyncpg pool for search, indexing and sync
        storage: Datastore settings (read from DB_* variables if None)

    Raises:
        TemplateConfigError: If the generation templates fail validation
    """
    config = config or load_config()
    http = httpx.AsyncClient(timeout=config.settings.knowledge_graph_timeout)
    pool = None
    try:
        if database:
            pool = await create_pool(storage or StorageConfig())
    except BaseException:
        await http.aclose()
        raise

    ctx = AppContext(config, http, pool)
    try:
        yield ctx
    finally:
        await ctx.aclose()
        logger.debug("Application context closed")
