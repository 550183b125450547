"""
Insights Service

Five short observations about a character. Generated text goes through the
structured extractor; a failed generation yields five synthesized insights.
"""

from __future__ import annotations

import logging

from src.common.telemetry import get_lens_metrics, get_tracer
from src.content.appearance import describe_appearance
from src.content.prompt_data import character_prompt_data
from src.exceptions import UpstreamCallFailure
from src.extraction import DocumentKind, InsightList, InsightSubject, InsightSynthesizer, StructuredExtractor
from src.knowledge.client import KnowledgeGraphClient
from src.llm.protocols import ImageDescriber, TemplateGenerator
from src.llm.templates import TemplateName

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class InsightsService:
    def __init__(
        self,
        knowledge: KnowledgeGraphClient,
        generator: TemplateGenerator,
        extractor: StructuredExtractor,
        vision: ImageDescriber | None = None,
        synthesizer: InsightSynthesizer | None = None,
        count: int = 5,
    ):
        self._knowledge = knowledge
        self._generator = generator
        self._extractor = extractor
        self._vision = vision
        self._synthesizer = synthesizer or InsightSynthesizer()
        self._count = count

    async def generate(self, character_id: int) -> InsightList:
        """
        Return exactly ``count`` insights for a character.

        Raises:
            EntityNotFoundError: If the character does not exist
        """
        with tracer.start_as_current_span("content.insights") as span:
            span.set_attribute("content.character_id", character_id)
            record = await self._knowledge.get_character(character_id)
            subject = InsightSubject.from_character(record)
            appearance = await describe_appearance(self._vision, record)
            try:
                text = await self._generator.generate(
                    TemplateName.CHARACTER_INSIGHTS, character_prompt_data(record, appearance)
                )
            except UpstreamCallFailure as e:
                logger.warning(f"Insight generation failed, using synthesized insights: {e}")
                get_lens_metrics().record_fallback("insights")
                span.set_attribute("content.fallback", True)
                return InsightList(insights=self._synthesizer.synthesize(subject, self._count))

            return self._extractor.extract(DocumentKind.INSIGHTS, text, subject=subject)
