"""
Generation Protocols

Defines the interfaces the content and search layers depend on.
Uses typing.Protocol for duck-typed interface definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from src.llm.templates import TemplateName


@runtime_checkable
class GenerationProvider(Protocol):
    """
    A chat-completion capability.

    Implementations raise UpstreamCallFailure when the endpoint is
    unreachable, rejects the request or returns no text.
    """

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        """Return the generated text, trimmed."""
        ...


@runtime_checkable
class TemplateGenerator(Protocol):
    """Generates text for a named template from prompt data."""

    async def generate(self, template_name: TemplateName, prompt_data: Mapping[str, Any]) -> str: ...


@runtime_checkable
class ImageDescriber(Protocol):
    """Describes the appearance of a character from its image."""

    async def describe(self, image_url: str, name: str) -> str: ...
