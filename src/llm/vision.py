"""
Vision Analyzer

Describes a character's appearance from its image with a multimodal chat
completion.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import openai

from src.common.telemetry import get_tracer
from src.exceptions import UpstreamCallFailure
from src.llm.provider import first_choice_text

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

# Substituted by flows that can proceed without an appearance description
VISUAL_UNAVAILABLE = "Visual appearance analysis not available."

VISION_PROMPT = """Describe how {name} from Rick and Morty looks in this image. Cover:
- physical appearance (hair, eyes, skin, build, face)
- clothing and accessories
- distinctive features or markings
- overall visual style

Be specific and stick to what is visible."""


class VisionAnalyzer:
    """Image description through an OpenAI-compatible multimodal model."""

    def __init__(self, client: AsyncOpenAI, model: str, max_tokens: int = 300):
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def describe(self, image_url: str, name: str) -> str:
        """
        Describe the character shown at image_url.

        Raises:
            UpstreamCallFailure: On any SDK error or an empty response
        """
        with tracer.start_as_current_span("llm.vision") as span:
            span.set_attribute("llm.model", self._model)
            logger.info(f"Analyzing image for {name} with {self._model}")
            try:
                response = await self._client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {
                            "role": "user",
                            "content": [
                                {"type": "text", "text": VISION_PROMPT.format(name=name)},
                                {"type": "image_url", "image_url": {"url": image_url}},
                            ],
                        }
                    ],
                    max_tokens=self._max_tokens,
                )
            except openai.OpenAIError as e:
                logger.warning(f"Vision call failed for {name}: {e}")
                raise UpstreamCallFailure("vision", str(e)) from e

            return first_choice_text(response, "vision")
