"""
Embedding Providers

Abstracts embedding generation over two providers:
- GeminiEmbedder: google-genai text-embedding-004 (default)
- OpenAIEmbedder: OpenAI embeddings API

Provider responses are not trusted to have one shape. extract_embedding_values
locates the numeric array and fit_to_dimension trims it to the index width.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx
import openai
from google.genai import errors as genai_errors
from pydantic import BaseModel

from src.common.telemetry import get_tracer
from src.config import EmbeddingProvider
from src.exceptions import ExtractionFailure, UpstreamCallFailure

if TYPE_CHECKING:
    from google import genai
    from openai import AsyncOpenAI

    from src.config import LensConfig

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

EMBEDDING_DIMENSION = 768

# Containers that wrap one embedding per input
_WRAPPER_KEYS = ("embeddings", "data")


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _as_vector(value: Any) -> list[float] | None:
    """Return value as floats if it is a non-empty numeric sequence."""
    if not isinstance(value, (list, tuple)) or not value:
        return None
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value):
        return None
    return [float(v) for v in value]


def _public_values(obj: Any) -> list[Any]:
    """Property values in declaration order, for generic inspection."""
    if isinstance(obj, Mapping):
        return list(obj.values())
    if isinstance(obj, BaseModel):
        return [getattr(obj, name) for name in type(obj).model_fields]
    if hasattr(obj, "__dict__"):
        return [v for k, v in vars(obj).items() if not k.startswith("_")]
    return []


def extract_embedding_values(response: Any) -> list[float]:
    """
    Locate the embedding array in a provider response.

    Accepts, after unwrapping an ``embeddings`` or ``data`` list to its
    first entry:
    1. an object with a ``values`` array (attribute or key)
    2. a bare numeric array
    3. any object whose first array-valued property is numeric

    Raises:
        ExtractionFailure: If no numeric array can be found
    """
    item = response
    for key in _WRAPPER_KEYS:
        wrapped = _get(response, key)
        if isinstance(wrapped, (list, tuple)):
            if not wrapped:
                raise ExtractionFailure(f"response '{key}' list is empty")
            if _as_vector(wrapped) is None:
                item = wrapped[0]
                break

    vector = _as_vector(_get(item, "values"))
    if vector is not None:
        return vector

    vector = _as_vector(item)
    if vector is not None:
        return vector

    for value in _public_values(item):
        vector = _as_vector(value)
        if vector is not None:
            return vector

    raise ExtractionFailure(f"no numeric array found in {type(item).__name__} response")


def fit_to_dimension(values: list[float], dimension: int = EMBEDDING_DIMENSION) -> list[float]:
    """
    Truncate a vector to ``dimension`` elements.

    Shorter vectors are returned unchanged with a warning; the index rejects
    them on upsert.
    """
    if len(values) > dimension:
        return values[:dimension]
    if len(values) < dimension:
        logger.warning(f"Embedding has {len(values)} dimensions, expected {dimension}; not padding")
    return values


class Embedder(ABC):
    """Abstract base class for embedding providers."""

    def __init__(self, dimension: int = EMBEDDING_DIMENSION):
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        return self._dimension

    async def embed(self, text: str) -> list[float]:
        """
        Generate an embedding of exactly ``dimension`` elements (or fewer, see fit_to_dimension).

        Raises:
            UpstreamCallFailure: If the provider call fails
            ExtractionFailure: If the response holds no numeric array
        """
        with tracer.start_as_current_span("search.embed") as span:
            span.set_attribute("search.provider", self.provider_name)
            span.set_attribute("search.text_length", len(text))
            response = await self._request(text)
            values = extract_embedding_values(response)
            span.set_attribute("search.raw_dimension", len(values))
            return fit_to_dimension(values, self._dimension)

    @property
    @abstractmethod
    def provider_name(self) -> str: ...

    @abstractmethod
    async def _request(self, text: str) -> Any:
        """Call the provider and return its raw response."""
        ...


class GeminiEmbedder(Embedder):
    """Embedder using Google's text-embedding models through google-genai."""

    def __init__(
        self,
        client: genai.Client,
        model: str = "text-embedding-004",
        dimension: int = EMBEDDING_DIMENSION,
    ):
        super().__init__(dimension)
        self._client = client
        self._model = model

    @property
    def provider_name(self) -> str:
        return EmbeddingProvider.GEMINI.value

    async def _request(self, text: str) -> Any:
        try:
            return await self._client.aio.models.embed_content(model=self._model, contents=text)
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error(f"Gemini embedding call failed: {e}")
            raise UpstreamCallFailure("embedding", str(e)) from e


class OpenAIEmbedder(Embedder):
    """Embedder using OpenAI's text-embedding models."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "text-embedding-3-small",
        dimension: int = EMBEDDING_DIMENSION,
    ):
        super().__init__(dimension)
        self._client = client
        self._model = model

    @property
    def provider_name(self) -> str:
        return EmbeddingProvider.OPENAI.value

    async def _request(self, text: str) -> Any:
        try:
            return await self._client.embeddings.create(model=self._model, input=text)
        except openai.OpenAIError as e:
            logger.error(f"OpenAI embedding call failed: {e}")
            raise UpstreamCallFailure("embedding", str(e)) from e


def create_embedder(config: LensConfig) -> Embedder:
    """
    Factory function to create the configured embedder.

    Raises:
        ConfigurationError: If the provider's API key is not set
    """
    api_key = config.get_embedding_api_key()
    if config.embedding_provider == EmbeddingProvider.GEMINI:
        from google import genai

        return GeminiEmbedder(
            client=genai.Client(api_key=api_key),
            model=config.embedding_model,
            dimension=config.embedding_dimension,
        )

    from src.llm.clients import create_openai_client

    return OpenAIEmbedder(
        client=create_openai_client(api_key=api_key),
        model=config.embedding_model,
        dimension=config.embedding_dimension,
    )
