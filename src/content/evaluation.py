"""
Evaluation Service

Scores a description against the record it describes. There is no safe
fallback for an evaluation, so generation failures propagate.
"""

from __future__ import annotations

import logging

from src.common.telemetry import get_tracer
from src.content.appearance import describe_appearance
from src.content.prompt_data import character_evaluation_prompt_data, location_evaluation_prompt_data
from src.extraction import (
    CHARACTER_EVALUATION,
    LOCATION_EVALUATION,
    DocumentKind,
    EvaluationNormalizer,
    EvaluationRecord,
    StructuredExtractor,
)
from src.knowledge.client import KnowledgeGraphClient
from src.llm.protocols import ImageDescriber, TemplateGenerator
from src.llm.templates import TemplateName

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class EvaluationService:
    def __init__(
        self,
        knowledge: KnowledgeGraphClient,
        generator: TemplateGenerator,
        extractor: StructuredExtractor,
        vision: ImageDescriber | None = None,
    ):
        self._knowledge = knowledge
        self._generator = generator
        self._extractor = extractor
        self._vision = vision
        self._character_normalizer = EvaluationNormalizer(CHARACTER_EVALUATION)
        self._location_normalizer = EvaluationNormalizer(LOCATION_EVALUATION)

    async def evaluate_character(self, character_id: int, description: str) -> EvaluationRecord:
        """
        Evaluate a character description.

        Raises:
            EntityNotFoundError: If the character does not exist
            UpstreamCallFailure: If the knowledge graph or generation call fails
            EvaluationIntegrityError: If the record fails normalization
        """
        with tracer.start_as_current_span("content.evaluate_character") as span:
            span.set_attribute("content.character_id", character_id)
            record = await self._knowledge.get_character(character_id)
            appearance = await describe_appearance(self._vision, record)
            text = await self._generator.generate(
                TemplateName.CHARACTER_EVALUATION,
                character_evaluation_prompt_data(record, appearance, description),
            )
            extracted = self._extractor.extract(DocumentKind.EVALUATION, text, evaluation=CHARACTER_EVALUATION)
            result = self._character_normalizer.normalize(extracted)
            span.set_attribute("content.auto_score", result.auto_score)
            return result

    async def evaluate_location(self, location_id: int, description: str) -> EvaluationRecord:
        """
        Evaluate a location description.

        Raises:
            EntityNotFoundError: If the location does not exist
            UpstreamCallFailure: If the knowledge graph or generation call fails
            EvaluationIntegrityError: If the record fails normalization
        """
        with tracer.start_as_current_span("content.evaluate_location") as span:
            span.set_attribute("content.location_id", location_id)
            record = await self._knowledge.get_location(location_id)
            text = await self._generator.generate(
                TemplateName.LOCATION_EVALUATION,
                location_evaluation_prompt_data(record, description),
            )
            extracted = self._extractor.extract(DocumentKind.EVALUATION, text, evaluation=LOCATION_EVALUATION)
            result = self._location_normalizer.normalize(extracted)
            span.set_attribute("content.auto_score", result.auto_score)
            return result
