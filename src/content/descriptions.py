"""
Description Service

Generates character and location descriptions. If generation fails, a
description assembled from the record's attributes is returned instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from src.common.telemetry import get_lens_metrics, get_tracer
from src.content.appearance import describe_appearance
from src.content.prompt_data import character_prompt_data, location_prompt_data
from src.exceptions import UpstreamCallFailure
from src.knowledge.client import KnowledgeGraphClient
from src.knowledge.models import CharacterRecord, LocationRecord
from src.llm.protocols import ImageDescriber, TemplateGenerator
from src.llm.templates import TemplateName

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class DescriptionResult:
    description: str
    generated: bool
    prompt_data: dict[str, Any] = field(default_factory=dict)


def fallback_character_description(record: CharacterRecord) -> str:
    kind = f" ({record.type})" if record.type else ""
    episodes = len(record.episodes)
    return (
        f"{record.name} is a {record.status.lower()} {record.species}{kind} from {record.origin_name}, "
        f"last seen at {record.location_name}. "
        f"They turn up in {episodes} episode{'s' if episodes != 1 else ''} of Rick and Morty."
    )


def fallback_location_description(record: LocationRecord) -> str:
    kind = record.type or "place"
    dimension = record.dimension or "an unknown dimension"
    residents = len(record.residents)
    return (
        f"{record.name} is a {kind.lower()} in {dimension}, "
        f"home to {residents} known resident{'s' if residents != 1 else ''} of the Rick and Morty multiverse."
    )


class DescriptionService:
    def __init__(
        self,
        knowledge: KnowledgeGraphClient,
        generator: TemplateGenerator,
        vision: ImageDescriber | None = None,
    ):
        self._knowledge = knowledge
        self._generator = generator
        self._vision = vision

    async def describe_character(self, character_id: int) -> DescriptionResult:
        """
        Describe a character, using its image for appearance details.

        Raises:
            EntityNotFoundError: If the character does not exist
            UpstreamCallFailure: If the knowledge graph cannot be read
        """
        with tracer.start_as_current_span("content.describe_character") as span:
            span.set_attribute("content.character_id", character_id)
            record = await self._knowledge.get_character(character_id)
            appearance = await describe_appearance(self._vision, record)
            prompt_data = character_prompt_data(record, appearance)
            try:
                text = await self._generator.generate(TemplateName.CHARACTER_DESCRIPTION, prompt_data)
            except UpstreamCallFailure as e:
                logger.warning(f"Character description generation failed, using fallback: {e}")
                get_lens_metrics().record_fallback("character_description")
                span.set_attribute("content.fallback", True)
                return DescriptionResult(fallback_character_description(record), False, prompt_data)
            return DescriptionResult(text, True, prompt_data)

    async def describe_location(self, location_id: int) -> DescriptionResult:
        """
        Describe a location and its residents.

        Raises:
            EntityNotFoundError: If the location does not exist
            UpstreamCallFailure: If the knowledge graph cannot be read
        """
        with tracer.start_as_current_span("content.describe_location") as span:
            span.set_attribute("content.location_id", location_id)
            record = await self._knowledge.get_location(location_id)
            prompt_data = location_prompt_data(record)
            try:
                text = await self._generator.generate(TemplateName.LOCATION_DESCRIPTION, prompt_data)
            except UpstreamCallFailure as e:
                logger.warning(f"Location description generation failed, using fallback: {e}")
                get_lens_metrics().record_fallback("location_description")
                span.set_attribute("content.fallback", True)
                return DescriptionResult(fallback_location_description(record), False, prompt_data)
            return DescriptionResult(text, True, prompt_data)
