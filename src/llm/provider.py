"""
Chat Completion Provider

GenerationProvider implementation on the OpenAI SDK. Works against any
OpenAI-compatible endpoint, Groq included.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import openai

from src.common.telemetry import get_tracer
from src.exceptions import UpstreamCallFailure

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def first_choice_text(response: Any, service: str) -> str:
    """Return the trimmed text of the first choice, or raise UpstreamCallFailure."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        raise UpstreamCallFailure(service, "response contained no choices")
    content = choices[0].message.content
    if not content or not content.strip():
        raise UpstreamCallFailure(service, "response contained no text")
    return content.strip()


class ChatCompletionProvider:
    """Sends one system/user exchange per call. No retries."""

    def __init__(self, client: AsyncOpenAI):
        self._client = client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        """
        Generate a completion.

        Args:
            system_prompt: Rendered system prompt
            user_prompt: Rendered user prompt
            model: Model identifier
            temperature: Sampling temperature
            max_tokens: Optional completion cap

        Returns:
            Generated text, trimmed

        Raises:
            UpstreamCallFailure: On any SDK error or an empty response
        """
        with tracer.start_as_current_span("llm.generate") as span:
            span.set_attribute("llm.model", model)
            span.set_attribute("llm.temperature", temperature)
            if max_tokens is not None:
                span.set_attribute("llm.max_tokens", max_tokens)

            kwargs: dict[str, Any] = {
                "model": model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": temperature,
            }
            if max_tokens is not None:
                kwargs["max_tokens"] = max_tokens

            try:
                response = await self._client.chat.completions.create(**kwargs)
            except openai.OpenAIError as e:
                logger.error(f"Generation call failed ({model}): {e}")
                span.set_attribute("llm.error", type(e).__name__)
                raise UpstreamCallFailure("generation", str(e)) from e

            text = first_choice_text(response, "generation")
            span.set_attribute("llm.response_length", len(text))
            return text
