"""
Document Schemas

One schema per document kind. A schema knows how to build a finished record
from each representation the cascade can recover: a decoded JSON value,
labeled sections, paragraphs or fixed-size partitions. Every builder except
from_partitions may return None to let the next strategy try.
"""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from src.extraction.insights import InsightSubject, InsightSynthesizer
from src.extraction.items import EMOJI, clean_item, is_content, split_marked_lines, split_sentences, text_to_items
from src.extraction.models import (
    NO_EXPLANATION,
    CompatibilityRecord,
    DocumentKind,
    EvaluationRecord,
    EvaluationSchema,
    ExtractionResult,
    InsightList,
)

logger = logging.getLogger(__name__)

SECTION_PLACEHOLDER = "No details could be recovered for this section."


def normalize_key(key: str) -> str:
    """``teamWork``, ``team_work`` and ``Team Work`` all become ``teamwork``."""
    return re.sub(r"[^a-z0-9]", "", key.lower())


_TRUE = frozenset({"true", "yes", "y", "1", "pass", "passed", "✅", "✓", "✔"})
_FALSE = frozenset({"false", "no", "n", "0", "fail", "failed", "❌", "✗", "✘"})


def coerce_bool(value: Any) -> bool | None:
    """Read a boolean from JSON or label text; None if it is not one."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().strip("\"'").lower()
        if token in _TRUE:
            return True
        if token in _FALSE:
            return False
    return None


def coerce_score(value: Any) -> float | None:
    """Read a numeric score, accepting strings such as ``"7.5"`` or ``"8/10"``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            score = float(value)
        except OverflowError:
            # Integers beyond float range are treated like non-finite scores
            return None
    elif isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if not match:
            return None
        score = float(match.group())
    else:
        return None
    return score if math.isfinite(score) else None


class DocumentSchema(ABC):
    """Builds records of one document kind from recovered structure."""

    kind: DocumentKind
    # First character of the kind's top-level JSON value
    json_opener: str = "{"

    @property
    @abstractmethod
    def section_count(self) -> int:
        """Number of partitions the positional fallback cuts the text into."""

    @abstractmethod
    def from_json(self, value: Any) -> ExtractionResult | None: ...

    @abstractmethod
    def from_labels(self, text: str) -> ExtractionResult | None: ...

    @abstractmethod
    def from_paragraphs(self, paragraphs: list[str]) -> ExtractionResult | None: ...

    @abstractmethod
    def from_partitions(self, parts: list[str]) -> ExtractionResult:
        """Always returns a record."""


# =============================================================================
# Compatibility
# =============================================================================


@dataclass(frozen=True)
class SectionSpec:
    """
    One list-valued section.

    Attributes:
        key: JSON key (camelCase)
        headers: Regex alternatives recognized as the section's header
        keywords: Lowercase stems scored when assigning paragraphs
    """

    key: str
    headers: tuple[str, ...]
    keywords: tuple[str, ...]

    def header_pattern(self) -> re.Pattern[str]:
        synonyms = "|".join(self.headers)
        return re.compile(
            rf"""
            ^[ \t]*(?:\#{{1,6}}[ \t]*)?(?:[*_]{{1,2}}[ \t]*)?   # heading or bold
            (?:\d+[.)][ \t]*)?                                # number
            (?:{EMOJI}[ \t]*)?                                # emoji marker
            (?:[*_]{{1,2}})?
            (?:{synonyms})
            [ \t]*(?:[*_]{{1,2}})?[ \t]*(?::|[-–][ \t]|$)
            """,
            re.IGNORECASE | re.MULTILINE | re.VERBOSE,
        )


COMPATIBILITY_SECTIONS = (
    SectionSpec(
        key="teamWork",
        headers=(r"team[ \t]*-?[ \t]*work", r"working[ \t]+together", r"how[ \t]+they[ \t]+work[ \t]+together"),
        keywords=("team", "together", "cooperat", "collaborat", "partner", "synerg", "complement"),
    ),
    SectionSpec(
        key="conflicts",
        headers=(r"conflicts?", r"fights?", r"what[ \t]+they(?:'|’)?d[ \t]+fight(?:[ \t]+(?:about|over))?", r"clash(?:es)?"),
        keywords=("conflict", "fight", "argu", "clash", "disagree", "tension", "rival"),
    ),
    SectionSpec(
        key="breaksFirst",
        headers=(r"breaks?[ \t]+first", r"who[ \t]+breaks(?:[ \t]+first)?", r"breaking[ \t]+point", r"under[ \t]+pressure"),
        keywords=("break", "pressure", "crack", "snap", "collapse", "first", "panic"),
    ),
)

_COMPATIBILITY_FIELDS = {normalize_key(s.key): s.key for s in COMPATIBILITY_SECTIONS} | {"conflict": "conflicts"}
_LEADING_NON_WORD = re.compile(r"^\W+")


def _section_items(text: str) -> list[str]:
    items = text_to_items(text)
    if items:
        return items
    stripped = clean_item(_LEADING_NON_WORD.sub("", text))
    return [stripped] if stripped else [SECTION_PLACEHOLDER]


def _compatibility(sections: dict[str, list[str]]) -> CompatibilityRecord:
    return CompatibilityRecord(
        teamWork=sections.get("teamWork", [SECTION_PLACEHOLDER]),
        conflicts=sections.get("conflicts", [SECTION_PLACEHOLDER]),
        breaksFirst=sections.get("breaksFirst", [SECTION_PLACEHOLDER]),
    )


class CompatibilitySchema(DocumentSchema):
    """teamWork / conflicts / breaksFirst lists."""

    kind = DocumentKind.COMPATIBILITY

    def __init__(self, sections: tuple[SectionSpec, ...] = COMPATIBILITY_SECTIONS):
        self._sections = sections
        self._patterns = [(spec.key, spec.header_pattern()) for spec in sections]

    @property
    def section_count(self) -> int:
        return len(self._sections)

    def from_json(self, value: Any) -> CompatibilityRecord | None:
        if not isinstance(value, dict):
            return None
        sections: dict[str, list[str]] = {}
        for raw_key, raw_value in value.items():
            key = _COMPATIBILITY_FIELDS.get(normalize_key(str(raw_key)))
            if key is None or key in sections:
                continue
            if isinstance(raw_value, list):
                sections[key] = [item if isinstance(item, str) else str(item) for item in raw_value if item is not None]
            elif isinstance(raw_value, str):
                sections[key] = _section_items(raw_value)
        if not sections:
            return None
        return _compatibility(sections)

    def from_labels(self, text: str) -> CompatibilityRecord | None:
        headers: list[tuple[int, int, str]] = []
        for key, pattern in self._patterns:
            headers.extend((m.start(), m.end(), key) for m in pattern.finditer(text))
        headers.sort()

        bodies: dict[str, str] = {}
        for index, (_, end, key) in enumerate(headers):
            if key in bodies:
                continue
            stop = headers[index + 1][0] if index + 1 < len(headers) else len(text)
            bodies[key] = text[end:stop]

        if len(bodies) < len(self._sections):
            return None
        return _compatibility({key: _section_items(body) for key, body in bodies.items()})

    def from_paragraphs(self, paragraphs: list[str]) -> CompatibilityRecord | None:
        if len(paragraphs) < len(self._sections):
            return None

        assigned: dict[str, str] = {}
        unmatched: list[str] = []
        for paragraph in paragraphs:
            lowered = paragraph.lower()
            best_key, best_score = None, 0
            for spec in self._sections:
                if spec.key in assigned:
                    continue
                score = sum(lowered.count(word) for word in spec.keywords)
                if score > best_score:
                    best_key, best_score = spec.key, score
            if best_key is None:
                unmatched.append(paragraph)
            else:
                assigned[best_key] = paragraph

        for spec in self._sections:
            if spec.key not in assigned and unmatched:
                assigned[spec.key] = unmatched.pop(0)

        return _compatibility({key: _section_items(body) for key, body in assigned.items()})

    def from_partitions(self, parts: list[str]) -> CompatibilityRecord:
        sections = {}
        for spec, part in zip(self._sections, parts):
            stripped = part.strip()
            sections[spec.key] = [stripped] if stripped else [SECTION_PLACEHOLDER]
        return _compatibility(sections)


# =============================================================================
# Evaluation
# =============================================================================


def _label_words(field: str) -> str:
    """``visualAppearanceMentioned`` -> ``visual[\\s_-]*appearance[\\s_-]*mentioned``."""
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", field).lower().split()
    return r"[\s_-]*".join(re.escape(w) for w in words)


_SCORE_LABEL = re.compile(
    r"^\W*(?:auto[\s_-]*score|overall[\s_-]*score|score)\W*?[:=]\s*\**\s*(-?\d+(?:\.\d+)?)",
    re.IGNORECASE | re.MULTILINE,
)
_EXPLANATION_LABEL = re.compile(
    r"^\W*explanation\W*?[:=]\s*(.+?)(?=\n\s*\n|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)


class EvaluationDocumentSchema(DocumentSchema):
    """checks / qualityChecks / autoScore / explanation for one EvaluationSchema."""

    kind = DocumentKind.EVALUATION

    def __init__(self, fields: EvaluationSchema):
        self._fields = fields
        self._known = {normalize_key(f) for f in fields.all_fields}
        self._labels = {
            field: re.compile(
                rf"^[\s\-*•]*[\"']?{_label_words(field)}[\"']?\s*[:=\-–]\s*[\"']?([A-Za-z]+|[01]|{EMOJI}|[✓✗✔✘])",
                re.IGNORECASE | re.MULTILINE,
            )
            for field in fields.all_fields
        }

    @property
    def section_count(self) -> int:
        return 1

    def _flags(self, fields: tuple[str, ...], nested: Any, flat: dict[str, Any]) -> dict[str, bool]:
        nested = nested if isinstance(nested, dict) else {}
        nested_lookup = {normalize_key(str(k)): v for k, v in nested.items()}
        flat_lookup = {normalize_key(str(k)): v for k, v in flat.items()}

        flags: dict[str, bool] = {}
        for field in fields:
            key = normalize_key(field)
            raw = nested_lookup.get(key, flat_lookup.get(key))
            value = coerce_bool(raw)
            if value is None and raw is not None:
                logger.warning(f"Evaluation field {field} has non-boolean value {raw!r}, using false")
            flags[field] = bool(value)

        for raw_key, raw in nested.items():
            if normalize_key(str(raw_key)) in self._known:
                continue
            value = coerce_bool(raw)
            if value is not None:
                flags[str(raw_key)] = value
        return flags

    def _record(
        self,
        checks: dict[str, bool],
        quality: dict[str, bool],
        score: float | None,
        explanation: Any,
    ) -> EvaluationRecord:
        if not isinstance(explanation, str) or not explanation.strip():
            explanation = NO_EXPLANATION
        return EvaluationRecord(
            checks=checks,
            qualityChecks=quality,
            autoScore=score if score is not None else 0.0,
            explanation=explanation.strip(),
        )

    def from_json(self, value: Any) -> EvaluationRecord | None:
        if not isinstance(value, dict):
            return None
        lookup = {normalize_key(str(k)): v for k, v in value.items()}
        recognized = {"checks", "qualitychecks", "autoscore", "score", "explanation"} | self._known
        if not recognized & lookup.keys():
            return None

        score_raw = lookup.get("autoscore", lookup.get("score"))
        return self._record(
            checks=self._flags(self._fields.checks, lookup.get("checks"), value),
            quality=self._flags(self._fields.quality_checks, lookup.get("qualitychecks"), value),
            score=coerce_score(score_raw),
            explanation=lookup.get("explanation"),
        )

    def from_labels(self, text: str) -> EvaluationRecord | None:
        found: dict[str, bool] = {}
        for field, pattern in self._labels.items():
            match = pattern.search(text)
            if match:
                value = coerce_bool(match.group(1))
                if value is not None:
                    found[field] = value

        score_match = _SCORE_LABEL.search(text)
        if not found and not score_match:
            return None

        explanation_match = _EXPLANATION_LABEL.search(text)
        return self._record(
            checks={f: found.get(f, False) for f in self._fields.checks},
            quality={f: found.get(f, False) for f in self._fields.quality_checks},
            score=coerce_score(score_match.group(1)) if score_match else None,
            explanation=explanation_match.group(1).strip().strip("\"',}").strip() if explanation_match else None,
        )

    def from_paragraphs(self, paragraphs: list[str]) -> EvaluationRecord | None:
        # Paragraphs carry no flags; the positional fallback keeps the whole text.
        return None

    def from_partitions(self, parts: list[str]) -> EvaluationRecord:
        return self._record(
            checks=dict.fromkeys(self._fields.checks, False),
            quality=dict.fromkeys(self._fields.quality_checks, False),
            score=None,
            explanation="".join(parts),
        )


# =============================================================================
# Insights
# =============================================================================

_INSIGHT_HEADING = re.compile(r"^(?:insights?|notes?|observations?|suggestions?)\s*:?$", re.IGNORECASE)


def _insight_items(pieces: list[str]) -> list[str]:
    items = [clean_item(p) for p in pieces]
    # Lead-ins such as "Here are five insights:" are not insights
    return [i for i in items if is_content(i) and not i.endswith(":") and not _INSIGHT_HEADING.match(i)]


class InsightsSchema(DocumentSchema):
    """An ordered list of exactly ``count`` insights, padded by the synthesizer."""

    kind = DocumentKind.INSIGHTS
    json_opener = "["

    def __init__(
        self,
        subject: InsightSubject | None = None,
        count: int = 5,
        synthesizer: InsightSynthesizer | None = None,
    ):
        self._subject = subject or InsightSubject()
        self._count = count
        self._synthesizer = synthesizer or InsightSynthesizer()

    @property
    def section_count(self) -> int:
        return self._count

    def _finish(self, insights: list[str]) -> InsightList:
        return InsightList(insights=self._synthesizer.pad(insights, self._subject, self._count))

    def from_json(self, value: Any) -> InsightList | None:
        if isinstance(value, dict):
            lookup = {normalize_key(str(k)): v for k, v in value.items()}
            value = lookup.get("insights", lookup.get("notes"))
        if not isinstance(value, list):
            return None

        insights = []
        for entry in value:
            if isinstance(entry, dict):
                entry = entry.get("text") or entry.get("insight")
            if isinstance(entry, str) and entry.strip():
                insights.append(entry)
        if not insights:
            return None
        return self._finish(insights)

    def from_labels(self, text: str) -> InsightList | None:
        pieces = split_marked_lines(text)
        if pieces is None:
            return None
        insights = _insight_items(pieces)
        return self._finish(insights) if insights else None

    def from_paragraphs(self, paragraphs: list[str]) -> InsightList | None:
        if len(paragraphs) >= 2:
            pieces = paragraphs
        elif paragraphs and len(paragraphs[0].splitlines()) >= 2:
            pieces = paragraphs[0].splitlines()
        elif paragraphs:
            pieces = split_sentences(paragraphs[0])
        else:
            return None
        insights = _insight_items(pieces)
        return self._finish(insights) if insights else None

    def from_partitions(self, parts: list[str]) -> InsightList:
        return self._finish([p.strip() for p in parts if is_content(p.strip())])
