"""
Insight Synthesizer

Deterministic, attribute-based insights. Used to pad an extracted insight
list to its required length and as the whole answer when generation fails.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from src.knowledge.models import UNKNOWN, CharacterRecord


@dataclass(frozen=True)
class InsightSubject:
    """Known attributes of the character the insights are about."""

    name: str = "This character"
    status: str = UNKNOWN
    species: str = UNKNOWN
    origin: str = UNKNOWN
    location: str = UNKNOWN

    @classmethod
    def from_character(cls, record: CharacterRecord) -> InsightSubject:
        return cls(
            name=record.name,
            status=record.status,
            species=record.species,
            origin=record.origin_name,
            location=record.location_name,
        )


_TEMPLATES: tuple[Callable[[InsightSubject], str], ...] = (
    lambda s: f"{s.name} is a {s.status} {s.species} with a unique role in the Rick and Morty universe.",
    lambda s: f"{s.name}'s origin in {s.origin} suggests a backstory with plenty of room to explore.",
    lambda s: f"{s.name}'s current location, {s.location}, says a lot about where their story stands.",
    lambda s: f"The look of {s.name} reflects both their species ({s.species}) and their personality.",
    lambda s: f"{s.name}'s journey through the multiverse offers rich narrative possibilities.",
    lambda s: f"Being {s.status.lower()} has not stopped {s.name} from leaving a mark on the show.",
    lambda s: f"Few {s.species} characters travel as far from {s.origin} as {s.name} does.",
)


class InsightSynthesizer:
    """Builds insights from a subject's attributes, always in the same order."""

    def synthesize(self, subject: InsightSubject, count: int) -> list[str]:
        """Return ``count`` insights, cycling the templates with a numbered suffix if needed."""
        insights = []
        for i in range(count):
            text = _TEMPLATES[i % len(_TEMPLATES)](subject)
            if i >= len(_TEMPLATES):
                text = f"{text} ({i // len(_TEMPLATES) + 1})"
            insights.append(text)
        return insights

    def pad(self, insights: list[str], subject: InsightSubject, count: int) -> list[str]:
        """
        Keep the first ``count`` insights and append synthesized ones to reach ``count``.

        Extracted insights stay a stable prefix; synthesized ones that duplicate
        an extracted insight are skipped.
        """
        result = list(insights[:count])
        if len(result) == count:
            return result

        seen = {i.casefold() for i in result}
        for candidate in self.synthesize(subject, count + len(_TEMPLATES)):
            if len(result) == count:
                break
            if candidate.casefold() not in seen:
                result.append(candidate)
                seen.add(candidate.casefold())
        return result
