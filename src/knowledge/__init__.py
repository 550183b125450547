"""Knowledge graph reader for characters and locations."""

from src.knowledge.client import KnowledgeGraphClient
from src.knowledge.models import (
    UNKNOWN,
    CharacterPage,
    CharacterRecord,
    EpisodeRef,
    LocationPage,
    LocationRecord,
    PageInfo,
    PlaceRef,
    ResidentRecord,
)

__all__ = [
    "UNKNOWN",
    "CharacterPage",
    "CharacterRecord",
    "EpisodeRef",
    "KnowledgeGraphClient",
    "LocationPage",
    "LocationRecord",
    "PageInfo",
    "PlaceRef",
    "ResidentRecord",
]
