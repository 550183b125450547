"""Character appearance lookup shared by the content flows."""

from __future__ import annotations

import logging

from src.exceptions import UpstreamCallFailure
from src.knowledge.models import CharacterRecord
from src.llm.protocols import ImageDescriber
from src.llm.vision import VISUAL_UNAVAILABLE

logger = logging.getLogger(__name__)


async def describe_appearance(vision: ImageDescriber | None, record: CharacterRecord) -> str:
    """Describe the character's image, or return a fixed note if that is not possible."""
    if vision is None or not record.image:
        return VISUAL_UNAVAILABLE
    try:
        return await vision.describe(record.image, record.name)
    except UpstreamCallFailure as e:
        logger.warning(f"Using placeholder appearance for {record.name}: {e}")
        return VISUAL_UNAVAILABLE
