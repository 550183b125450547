"""
Semantic Search

Query enhancement, embedding and similarity ranking over the unified
character/location index, plus the index writer and sync job.
"""

from src.search.embedders import (
    EMBEDDING_DIMENSION,
    Embedder,
    GeminiEmbedder,
    OpenAIEmbedder,
    create_embedder,
    extract_embedding_values,
    fit_to_dimension,
)
from src.search.enhancer import QueryEnhancer
from src.search.indexer import EntityIndex, character_embedding_text, location_embedding_text
from src.search.models import Entity, EntityVariant, SearchResponse, SearchResult
from src.search.ranker import SimilarityRanker
from src.search.service import SemanticSearchService
from src.search.sync import EntitySync, SyncReport

__all__ = [
    "EMBEDDING_DIMENSION",
    "Embedder",
    "Entity",
    "EntityIndex",
    "EntitySync",
    "EntityVariant",
    "GeminiEmbedder",
    "OpenAIEmbedder",
    "QueryEnhancer",
    "SearchResponse",
    "SearchResult",
    "SemanticSearchService",
    "SimilarityRanker",
    "SyncReport",
    "character_embedding_text",
    "create_embedder",
    "extract_embedding_values",
    "fit_to_dimension",
    "location_embedding_text",
]
