"""
Entity Index

Owns the unified ``entities`` table: schema setup, upserts and counts.
Every stored embedding has exactly the index dimension.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.common.storage import DATABASE_ERRORS
from src.common.telemetry import get_tracer
from src.exceptions import UpstreamCallFailure
from src.knowledge.models import CharacterRecord, LocationRecord
from src.search.embedders import EMBEDDING_DIMENSION
from src.search.models import Entity, EntityVariant
from src.search.vectors import require_dimension, to_pgvector

if TYPE_CHECKING:
    from asyncpg import Pool

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def schema_statements(dimension: int = EMBEDDING_DIMENSION) -> list[str]:
    """DDL for the pgvector extension, the entities table and its indexes."""
    return [
        "CREATE EXTENSION IF NOT EXISTS vector",
        f"""
        CREATE TABLE IF NOT EXISTS entities (
            id INTEGER NOT NULL,
            entity_type TEXT NOT NULL CHECK (entity_type IN ('character', 'location')),
            name TEXT NOT NULL,
            status TEXT,
            species TEXT,
            type TEXT,
            gender TEXT,
            image TEXT,
            location_name TEXT,
            location_type TEXT,
            dimension TEXT,
            embedding vector({dimension}),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            PRIMARY KEY (id, entity_type)
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS entities_embedding_idx
        ON entities USING ivfflat (embedding vector_cosine_ops)
        WITH (lists = 100)
        WHERE embedding IS NOT NULL
        """,
        "CREATE INDEX IF NOT EXISTS idx_entities_name ON entities (name)",
        "CREATE INDEX IF NOT EXISTS idx_entities_type ON entities (entity_type)",
    ]


UPSERT_SQL = """
INSERT INTO entities (
    id, entity_type, name, status, species, type, gender, image,
    location_name, location_type, dimension, embedding, updated_at
)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12::vector, NOW())
ON CONFLICT (id, entity_type) DO UPDATE SET
    name = EXCLUDED.name,
    status = EXCLUDED.status,
    species = EXCLUDED.species,
    type = EXCLUDED.type,
    gender = EXCLUDED.gender,
    image = EXCLUDED.image,
    location_name = EXCLUDED.location_name,
    location_type = EXCLUDED.location_type,
    dimension = EXCLUDED.dimension,
    embedding = EXCLUDED.embedding,
    updated_at = NOW()
"""

COUNTS_SQL = """
SELECT
    entity_type,
    COUNT(*) AS total,
    COUNT(embedding) AS embedded
FROM entities
GROUP BY entity_type
"""


def character_entity(record: CharacterRecord) -> Entity:
    return Entity(
        id=record.id,
        variant=EntityVariant.CHARACTER,
        name=record.name,
        status=record.status,
        species=record.species,
        type=record.type or None,
        gender=record.gender,
        image=record.image,
        location_name=record.location.name if record.location else None,
    )


def location_entity(record: LocationRecord) -> Entity:
    return Entity(
        id=record.id,
        variant=EntityVariant.LOCATION,
        name=record.name,
        location_type=record.type or None,
        dimension=record.dimension or None,
    )


def character_embedding_text(record: CharacterRecord, appearance: str | None = None) -> str:
    """Sentence-joined attribute text embedded for a character."""
    parts = [
        f"Character: {record.name}",
        f"Status: {record.status}",
        f"Species: {record.species}",
        f"Type: {record.type}" if record.type else "",
        f"Gender: {record.gender}",
    ]
    if record.origin and record.origin.name:
        parts.append(f"Origin: {record.origin.name} ({record.origin.dimension or 'Unknown dimension'})")
    if record.location and record.location.name:
        parts.append(f"Location: {record.location.name} ({record.location.dimension or 'Unknown dimension'})")
    if record.episodes:
        parts.append(f"Appears in {len(record.episodes)} episodes")
    if appearance:
        parts.append(f"Visual Appearance: {appearance}")
    return ". ".join(p for p in parts if p)


def location_embedding_text(record: LocationRecord) -> str:
    """Sentence-joined attribute text embedded for a location."""
    parts = [
        f"Location: {record.name}",
        f"Type: {record.type}" if record.type else "",
        f"Dimension: {record.dimension}" if record.dimension else "",
        f"Has {len(record.residents)} residents" if record.residents else "",
    ]
    return ". ".join(p for p in parts if p)


class EntityIndex:
    """Write side of the vector index."""

    def __init__(self, pool: Pool, dimension: int = EMBEDDING_DIMENSION):
        self._pool = pool
        self._dimension = dimension

    async def ensure_schema(self) -> None:
        """Create the extension, table and indexes if they do not exist."""
        try:
            async with self._pool.acquire() as conn:
                for statement in schema_statements(self._dimension):
                    await conn.execute(statement)
        except DATABASE_ERRORS as e:
            raise UpstreamCallFailure("datastore", f"schema setup failed: {e}") from e
        logger.info(f"Entities table ready (vector({self._dimension}))")

    async def upsert(self, entity: Entity, vector: list[float] | None) -> None:
        """
        Insert or update one entity.

        Args:
            entity: Entity attributes
            vector: Embedding of exactly ``dimension`` elements, or None to store
                the entity without one (it is then excluded from search)

        Raises:
            DimensionMismatchError: If the vector has the wrong length
            UpstreamCallFailure: If the write fails
        """
        if vector is not None:
            require_dimension(vector, self._dimension)

        with tracer.start_as_current_span("search.upsert") as span:
            span.set_attribute("search.entity_type", entity.variant.value)
            span.set_attribute("search.entity_id", entity.id)
            span.set_attribute("search.has_embedding", vector is not None)
            try:
                async with self._pool.acquire() as conn:
                    await conn.execute(
                        UPSERT_SQL,
                        entity.id,
                        entity.variant.value,
                        entity.name,
                        entity.status,
                        entity.species,
                        entity.type,
                        entity.gender,
                        entity.image,
                        entity.location_name,
                        entity.location_type,
                        entity.dimension,
                        to_pgvector(vector) if vector is not None else None,
                    )
            except DATABASE_ERRORS as e:
                raise UpstreamCallFailure("datastore", str(e)) from e

    async def counts(self) -> dict[str, dict[str, int]]:
        """Per-variant totals and embedded totals, e.g. ``{"character": {"total": 826, "embedded": 826}}``."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(COUNTS_SQL)
        except DATABASE_ERRORS as e:
            raise UpstreamCallFailure("datastore", str(e)) from e

        counts = {variant.value: {"total": 0, "embedded": 0} for variant in EntityVariant}
        for row in rows:
            counts[row["entity_type"]] = {"total": row["total"], "embedded": row["embedded"]}
        return counts
