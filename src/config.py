"""
Multiverse Lens Configuration

Configuration settings using pydantic-settings for environment variable support.
The settings object and the template registry are built once at startup and
passed explicitly to the services that need them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.exceptions import ConfigurationError
from src.llm.templates import TemplateRegistry, load_template_registry

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
RICK_AND_MORTY_GRAPHQL_URL = "https://rickandmortyapi.com/graphql"


class EmbeddingProvider(str, Enum):
    """Embedding backends."""

    GEMINI = "gemini"
    OPENAI = "openai"


class LensConfig(BaseSettings):
    """
    Configuration for the Multiverse Lens system.

    Reads from environment variables with LENS_ prefix. The provider API keys
    also accept the unprefixed names used by their SDKs.
    """

    model_config = SettingsConfigDict(
        env_prefix="LENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Generation
    llm_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LENS_LLM_API_KEY", "GROQ_API_KEY", "LLM_API_KEY"),
        description="API key for the OpenAI-compatible generation endpoint",
    )
    llm_base_url: str = Field(
        default=GROQ_BASE_URL,
        description="Base URL of the OpenAI-compatible generation endpoint",
    )
    llm_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds for generation calls",
    )
    vision_model: str = Field(
        default="meta-llama/llama-4-scout-17b-16e-instruct",
        description="Multimodal model used to describe character images",
    )
    vision_max_tokens: int = Field(
        default=300,
        ge=1,
        description="Maximum tokens for an image description",
    )

    # Embeddings
    embedding_provider: EmbeddingProvider = Field(
        default=EmbeddingProvider.GEMINI,
        description="Embedding backend",
    )
    embedding_model: str = Field(
        default="text-embedding-004",
        description="Embedding model name",
    )
    embedding_dimension: int = Field(
        default=768,
        ge=1,
        description="Fixed embedding length stored in the vector index",
    )
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LENS_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="Google AI API key for Gemini embeddings",
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LENS_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key for OpenAI embeddings",
    )

    # Knowledge graph
    knowledge_graph_url: str = Field(
        default=RICK_AND_MORTY_GRAPHQL_URL,
        description="GraphQL endpoint of the entity knowledge graph",
    )
    knowledge_graph_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds for knowledge graph reads",
    )

    # Behaviour
    search_default_limit: int = Field(
        default=6,
        ge=1,
        description="Number of results returned by a search when no limit is given",
    )
    insight_count: int = Field(
        default=5,
        ge=1,
        description="Number of insights returned per character",
    )
    sync_analyze_images: bool = Field(
        default=True,
        description="Whether the sync job describes character images before embedding",
    )
    template_config_path: Path | None = Field(
        default=None,
        description="Override path for the generation template JSON file",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )

    def get_llm_api_key(self) -> str:
        """Get the generation API key or fail with a configuration error."""
        if not self.llm_api_key:
            raise ConfigurationError("GROQ_API_KEY (or LLM_API_KEY) not set")
        return self.llm_api_key

    def get_embedding_api_key(self) -> str:
        """Get the API key for the configured embedding provider."""
        if self.embedding_provider == EmbeddingProvider.GEMINI:
            if not self.google_api_key:
                raise ConfigurationError("GOOGLE_API_KEY not set")
            return self.google_api_key
        if not self.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY not set")
        return self.openai_api_key


@dataclass(frozen=True)
class LoadedConfig:
    """Settings plus the validated template registry."""

    settings: LensConfig
    templates: TemplateRegistry


def load_config(settings: LensConfig | None = None) -> LoadedConfig:
    """
    Load configuration from the environment and validate every template.

    Raises:
        TemplateConfigError: If the template file is missing an entry or invalid
    """
    settings = settings or LensConfig()
    templates = load_template_registry(settings.template_config_path)
    return LoadedConfig(settings=settings, templates=templates)
