"""
Search Data Models

Entities are identified by (id, variant); ids are only unique within a
variant. Search results carry the cosine distance to the query vector.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntityVariant(str, Enum):
    """Mutually exclusive entity record shapes."""

    CHARACTER = "character"
    LOCATION = "location"


@dataclass(frozen=True)
class Entity:
    """
    An indexed character or location.

    Character attributes are None for locations and vice versa.
    """

    id: int
    variant: EntityVariant
    name: str
    # Character
    status: str | None = None
    species: str | None = None
    type: str | None = None
    gender: str | None = None
    image: str | None = None
    location_name: str | None = None
    # Location
    location_type: str | None = None
    dimension: str | None = None

    @property
    def key(self) -> tuple[int, EntityVariant]:
        return (self.id, self.variant)


@dataclass(frozen=True)
class SearchResult:
    """An entity and its cosine distance to the query (lower is more similar)."""

    entity: Entity
    distance: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SearchResult:
        """Build a result from an ``entities`` row with a ``distance`` column."""
        variant = EntityVariant(row["entity_type"])
        if variant == EntityVariant.CHARACTER:
            entity = Entity(
                id=row["id"],
                variant=variant,
                name=row["name"],
                status=row["status"],
                species=row["species"],
                type=row["type"],
                gender=row["gender"],
                image=row["image"],
                location_name=row["location_name"],
            )
        else:
            entity = Entity(
                id=row["id"],
                variant=variant,
                name=row["name"],
                location_type=row["location_type"],
                dimension=row["dimension"],
            )
        return cls(entity=entity, distance=float(row["distance"]))

    def to_dict(self) -> dict[str, Any]:
        """Flat projection tagged with the variant, as shown to callers."""
        e = self.entity
        data: dict[str, Any] = {"id": e.id, "name": e.name, "variant": e.variant.value}
        if e.variant == EntityVariant.CHARACTER:
            data.update(
                status=e.status,
                species=e.species,
                type=e.type,
                gender=e.gender,
                image=e.image,
                location=e.location_name,
            )
        else:
            data.update(location_type=e.location_type, dimension=e.dimension)
        data["distance"] = self.distance
        return data


@dataclass(frozen=True)
class SearchResponse:
    query: str
    results: list[SearchResult] = field(default_factory=list)
    enhanced_query: str | None = None

    @property
    def total(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
            "total": self.total,
        }
