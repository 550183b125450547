"""
Content Flows

Descriptions, insights, compatibility analyses and description evaluations
built from knowledge graph records.
"""

from src.content.compatibility import CompatibilityService, fallback_compatibility
from src.content.descriptions import (
    DescriptionResult,
    DescriptionService,
    fallback_character_description,
    fallback_location_description,
)
from src.content.evaluation import EvaluationService
from src.content.insights import InsightsService

__all__ = [
    "CompatibilityService",
    "DescriptionResult",
    "DescriptionService",
    "EvaluationService",
    "InsightsService",
    "fallback_character_description",
    "fallback_compatibility",
    "fallback_location_description",
]
