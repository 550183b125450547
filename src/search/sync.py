"""
Entity Sync

Pages through the knowledge graph and writes every character and location
into the entity index with an embedding. A failure on one entity is logged
and counted; the run continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.common.telemetry import get_tracer
from src.exceptions import DimensionMismatchError, ExtractionFailure, UpstreamCallFailure
from src.knowledge.client import KnowledgeGraphClient
from src.knowledge.models import CharacterRecord, LocationRecord
from src.llm.protocols import ImageDescriber
from src.search.embedders import Embedder
from src.search.indexer import (
    EntityIndex,
    character_embedding_text,
    character_entity,
    location_embedding_text,
    location_entity,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

PROGRESS_EVERY = 50


@dataclass
class SyncReport:
    """Outcome of a sync run."""

    characters_stored: int = 0
    locations_stored: int = 0
    missing_embeddings: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


class EntitySync:
    """Copies the knowledge graph into the entity index."""

    def __init__(
        self,
        knowledge: KnowledgeGraphClient,
        embedder: Embedder,
        index: EntityIndex,
        vision: ImageDescriber | None = None,
    ):
        self._knowledge = knowledge
        self._embedder = embedder
        self._index = index
        self._vision = vision

    async def run(self, characters: bool = True, locations: bool = True) -> SyncReport:
        """
        Sync both variants.

        Page fetch failures abort the run; per-entity failures do not.
        """
        report = SyncReport()
        with tracer.start_as_current_span("search.sync") as span:
            if characters:
                async for record in self._knowledge.iter_characters():
                    await self._store_character(record, report)
                logger.info(f"Stored {report.characters_stored} characters")
            if locations:
                async for record in self._knowledge.iter_locations():
                    await self._store_location(record, report)
                logger.info(f"Stored {report.locations_stored} locations")

            span.set_attribute("search.characters_stored", report.characters_stored)
            span.set_attribute("search.locations_stored", report.locations_stored)
            span.set_attribute("search.sync_failures", report.failed)
        return report

    async def _appearance(self, record: CharacterRecord) -> str | None:
        if self._vision is None or not record.image:
            return None
        try:
            return await self._vision.describe(record.image, record.name)
        except UpstreamCallFailure as e:
            logger.warning(f"Image analysis failed for character {record.id} ({record.name}): {e}")
            return None

    async def _embedding(self, text: str, label: str, report: SyncReport) -> list[float] | None:
        """Embed text; on failure the entity is stored without a vector."""
        try:
            vector = await self._embedder.embed(text)
        except (UpstreamCallFailure, ExtractionFailure) as e:
            logger.warning(f"Embedding failed for {label}: {e}")
            report.missing_embeddings += 1
            return None
        if len(vector) != self._embedder.dimension:
            logger.warning(f"Embedding for {label} has {len(vector)} dimensions, storing without vector")
            report.missing_embeddings += 1
            return None
        return vector

    async def _store_character(self, record: CharacterRecord, report: SyncReport) -> None:
        label = f"character {record.id} ({record.name})"
        appearance = await self._appearance(record)
        vector = await self._embedding(character_embedding_text(record, appearance), label, report)
        try:
            await self._index.upsert(character_entity(record), vector)
        except (UpstreamCallFailure, DimensionMismatchError) as e:
            logger.error(f"Failed to store {label}: {e}")
            report.failures.append(label)
            return
        report.characters_stored += 1
        if report.characters_stored % PROGRESS_EVERY == 0:
            logger.info(f"Stored {report.characters_stored} characters...")

    async def _store_location(self, record: LocationRecord, report: SyncReport) -> None:
        label = f"location {record.id} ({record.name})"
        vector = await self._embedding(location_embedding_text(record), label, report)
        try:
            await self._index.upsert(location_entity(record), vector)
        except (UpstreamCallFailure, DimensionMismatchError) as e:
            logger.error(f"Failed to store {label}: {e}")
            report.failures.append(label)
            return
        report.locations_stored += 1
        if report.locations_stored % PROGRESS_EVERY == 0:
            logger.info(f"Stored {report.locations_stored} locations...")
