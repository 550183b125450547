"""
Extraction Records

The three document kinds the structured extractor produces. JSON field names
follow the generation prompts (camelCase); Python attributes are snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

NO_EXPLANATION = "No explanation provided"
MAX_SCORE = 10.0


class DocumentKind(str, Enum):
    COMPATIBILITY = "compatibility"
    EVALUATION = "evaluation"
    INSIGHTS = "insights"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json(self) -> dict[str, Any]:
        """Dump with the camelCase keys used on the wire."""
        return self.model_dump(by_alias=True)


class CompatibilityRecord(_Record):
    team_work: list[str] = Field(alias="teamWork")
    conflicts: list[str]
    breaks_first: list[str] = Field(alias="breaksFirst")


class EvaluationRecord(_Record):
    """
    A description evaluation.

    auto_score is brought into [0, 10] by EvaluationNormalizer.
    """

    checks: dict[str, bool]
    quality_checks: dict[str, bool] = Field(alias="qualityChecks")
    auto_score: float = Field(alias="autoScore")
    explanation: str = NO_EXPLANATION


class InsightList(_Record):
    insights: list[str]

    def to_json(self) -> dict[str, Any]:
        return {"insights": list(self.insights)}


ExtractionResult = Union[CompatibilityRecord, EvaluationRecord, InsightList]


@dataclass(frozen=True)
class EvaluationSchema:
    """The enumerated boolean fields of one evaluation prompt."""

    name: str
    checks: tuple[str, ...]
    quality_checks: tuple[str, ...]

    @property
    def all_fields(self) -> tuple[str, ...]:
        return self.checks + self.quality_checks


CHARACTER_EVALUATION = EvaluationSchema(
    name="character",
    checks=(
        "nameMentioned",
        "statusMentioned",
        "speciesMentioned",
        "typeMentioned",
        "genderMentioned",
        "originMentioned",
        "locationMentioned",
        "visualAppearanceMentioned",
    ),
    quality_checks=(
        "hasEpisodeContext",
        "hasLocationContext",
        "hasRickAndMortyStyle",
        "hasCharacterDepth",
    ),
)

LOCATION_EVALUATION = EvaluationSchema(
    name="location",
    checks=(
        "nameMentioned",
        "typeMentioned",
        "dimensionMentioned",
        "totalResidentsMentioned",
    ),
    quality_checks=(
        "hasResidentInfo",
        "hasContext",
        "hasRickAndMortyStyle",
    ),
)
