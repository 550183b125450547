"""
LLM Client Factory

Creates the AsyncOpenAI client shared by generation and image analysis.
The client points at an OpenAI-compatible endpoint (Groq by default).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from openai import AsyncOpenAI

    from src.config import LensConfig

logger = logging.getLogger(__name__)


def create_openai_client(
    *,
    api_key: str,
    base_url: str | None = None,
    timeout: float | None = None,
) -> AsyncOpenAI:
    """
    Create an async OpenAI-compatible client.

    Retries are disabled: a failed call surfaces immediately and recovery,
    where it exists, happens at the call site.

    Args:
        api_key: API key for the endpoint
        base_url: Endpoint base URL (None for api.openai.com)
        timeout: Request timeout in seconds

    Returns:
        Configured AsyncOpenAI client
    """
    from openai import AsyncOpenAI

    kwargs: dict = {"api_key": api_key, "max_retries": 0}
    if base_url:
        kwargs["base_url"] = base_url
    if timeout is not None:
        kwargs["timeout"] = timeout

    logger.debug(f"Creating AsyncOpenAI client for {base_url or 'default endpoint'}")
    return AsyncOpenAI(**kwargs)


def create_generation_client(config: LensConfig) -> AsyncOpenAI:
    """Create the client for the configured generation endpoint."""
    return create_openai_client(
        api_key=config.get_llm_api_key(),
        base_url=config.llm_base_url,
        timeout=config.llm_timeout,
    )
