"""
Compatibility Service

How two characters would get along at a location. The three records and the
two image descriptions are fetched concurrently before the prompt is built.
"""

from __future__ import annotations

import asyncio
import logging

from src.common.telemetry import get_lens_metrics, get_tracer
from src.content.appearance import describe_appearance
from src.content.prompt_data import compatibility_prompt_data
from src.exceptions import UpstreamCallFailure
from src.extraction import CompatibilityRecord, DocumentKind, StructuredExtractor
from src.knowledge.client import KnowledgeGraphClient
from src.knowledge.models import CharacterRecord, LocationRecord
from src.llm.protocols import ImageDescriber, TemplateGenerator
from src.llm.templates import TemplateName

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def fallback_compatibility(
    first: CharacterRecord,
    second: CharacterRecord,
    location: LocationRecord,
) -> CompatibilityRecord:
    """Attribute-based analysis used when generation is unavailable."""
    same_species = first.species == second.species
    if first.status == "Dead":
        breaker = first.name
    elif second.status == "Dead":
        breaker = second.name
    else:
        breaker = "Either character"

    return CompatibilityRecord(
        teamWork=[
            f"{first.name} and {second.name} would have a {'natural' if same_species else 'challenging'} "
            f"dynamic as a team.",
            f"Coming from {first.origin_name} and {second.origin_name} could create synergies or tensions.",
        ],
        conflicts=[
            f"They might clash over how they approach problems"
            f"{'' if same_species else ', starting with being different species'}.",
            f"{first.name} being {first.status.lower()} and {second.name} being {second.status.lower()} "
            f"could add friction.",
        ],
        breaksFirst=[
            f"{breaker} might be the first to break under pressure at {location.name}, "
            f"depending on how things unfold.",
        ],
    )


class CompatibilityService:
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

    async def analyze(self, first_id: int, second_id: int, location_id: int) -> CompatibilityRecord:
        """
        Analyze two characters placed together at a location.

        Raises:
            EntityNotFoundError: If any of the three records does not exist
            UpstreamCallFailure: If the knowledge graph cannot be read
        """
        with tracer.start_as_current_span("content.compatibility") as span:
            span.set_attribute("content.character_ids", f"{first_id},{second_id}")
            span.set_attribute("content.location_id", location_id)

            first, second, location = await asyncio.gather(
                self._knowledge.get_character(first_id),
                self._knowledge.get_character(second_id),
                self._knowledge.get_location(location_id),
            )
            first_look, second_look = await asyncio.gather(
                describe_appearance(self._vision, first),
                describe_appearance(self._vision, second),
            )

            prompt_data = compatibility_prompt_data(first, first_look, second, second_look, location)
            try:
                text = await self._generator.generate(TemplateName.CHARACTER_COMPATIBILITY, prompt_data)
            except UpstreamCallFailure as e:
                logger.warning(f"Compatibility generation failed, using fallback: {e}")
                get_lens_metrics().record_fallback("compatibility")
                span.set_attribute("content.fallback", True)
                return fallback_compatibility(first, second, location)

            return self._extractor.extract(DocumentKind.COMPATIBILITY, text)
