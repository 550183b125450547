"""
Knowledge Graph Records

Pydantic models for the character and location records returned by the
GraphQL knowledge graph. GraphQL ids arrive as strings and are coerced to int.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN = "Unknown"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class PlaceRef(_Record):
    """A character's origin or current location."""

    id: int | None = None
    name: str | None = None
    type: str | None = None
    dimension: str | None = None


class EpisodeRef(_Record):
    id: int
    name: str
    episode: str = ""
    air_date: str | None = None


class NamedRef(_Record):
    name: str | None = None


class ResidentRecord(_Record):
    """A character as listed among a location's residents."""

    id: int
    name: str
    status: str | None = None
    species: str | None = None
    type: str | None = None
    gender: str | None = None
    origin: NamedRef | None = None
    location: NamedRef | None = None


class CharacterRecord(_Record):
    id: int
    name: str
    status: str = UNKNOWN
    species: str = UNKNOWN
    type: str = ""
    gender: str = UNKNOWN
    image: str | None = None
    origin: PlaceRef | None = None
    location: PlaceRef | None = None
    episodes: list[EpisodeRef] = Field(default_factory=list, alias="episode")

    @field_validator("status", "species", "gender", mode="before")
    @classmethod
    def _unknown_if_null(cls, value: str | None) -> str:
        return value or UNKNOWN

    @field_validator("type", mode="before")
    @classmethod
    def _empty_if_null(cls, value: str | None) -> str:
        return value or ""

    @property
    def origin_name(self) -> str:
        return (self.origin.name if self.origin else None) or UNKNOWN

    @property
    def location_name(self) -> str:
        return (self.location.name if self.location else None) or UNKNOWN


class LocationRecord(_Record):
    id: int
    name: str
    type: str = ""
    dimension: str = ""
    residents: list[ResidentRecord] = Field(default_factory=list)

    @field_validator("type", "dimension", mode="before")
    @classmethod
    def _empty_if_null(cls, value: str | None) -> str:
        return value or ""


class PageInfo(_Record):
    count: int = 0
    pages: int = 0
    next: int | None = None
    prev: int | None = None


class CharacterPage(_Record):
    info: PageInfo
    results: list[CharacterRecord] = Field(default_factory=list)


class LocationPage(_Record):
    info: PageInfo
    results: list[LocationRecord] = Field(default_factory=list)
