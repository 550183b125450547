"""
Parsing Strategies

The extraction cascade as an ordered list of strategy objects. Each strategy
recovers some structure from the raw text and hands it to the document
schema; the first one that yields a record wins. PositionalStrategy always
yields a record and must be last.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.extraction.models import ExtractionResult
    from src.extraction.schemas import DocumentSchema

# Bounds the embedded-JSON scan on text with many stray brackets
MAX_JSON_CANDIDATES = 64

_FENCE_OPEN = re.compile(r"^```[\w-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n|^[ \t]*(?:-{3,}|\*{3,}|_{3,})[ \t]*$", re.MULTILINE)

_CLOSERS = {"{": "}", "[": "]"}

# json.loads failures: malformed text, over-long integer literals, excessive nesting
JSON_ERRORS = (ValueError, RecursionError)


def strip_code_fence(text: str) -> str:
    """Remove at most one leading and one trailing ``` delimiter."""
    text = _FENCE_OPEN.sub("", text.strip(), count=1)
    return _FENCE_CLOSE.sub("", text, count=1).strip()


def match_brackets(text: str, start: int) -> int | None:
    """
    Return the index just past the bracket that closes ``text[start]``.

    Brackets inside JSON strings (including escaped quotes) are ignored.
    Returns None if the brackets are unbalanced or mismatched.
    """
    expected: list[str] = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            expected.append(_CLOSERS[ch])
        elif ch in "}]":
            if not expected or expected.pop() != ch:
                return None
            if not expected:
                return i + 1
    return None


def iter_json_candidates(text: str, opener: str) -> Iterator[str]:
    """Yield bracket-balanced substrings starting at each ``opener``, left to right."""
    position = text.find(opener)
    yielded = 0
    while position != -1 and yielded < MAX_JSON_CANDIDATES:
        end = match_brackets(text, position)
        if end is not None:
            yield text[position:end]
            yielded += 1
        position = text.find(opener, position + 1)


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines and horizontal rules (---, ***, ___)."""
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p and p.strip()]


def partition_text(text: str, n: int) -> list[str]:
    """
    Cut text into ``n`` character ranges of ``len(text) // n``.

    The last range takes the remainder, so the parts concatenate back to
    the original text.
    """
    if n < 1:
        raise ValueError(f"partition count must be >= 1, got {n}")
    size = len(text) // n
    parts = [text[i * size : (i + 1) * size] for i in range(n - 1)]
    parts.append(text[(n - 1) * size :])
    return parts


class ExtractionStrategy(ABC):
    """One tier of the cascade."""

    name: str

    @abstractmethod
    def apply(self, text: str, schema: DocumentSchema) -> ExtractionResult | None:
        """Return a record, or None to defer to the next strategy."""


class StrictJsonStrategy(ExtractionStrategy):
    name = "strict_json"

    def apply(self, text: str, schema: DocumentSchema) -> ExtractionResult | None:
        try:
            value = json.loads(strip_code_fence(text))
        except JSON_ERRORS:
            return None
        return schema.from_json(value)


class EmbeddedJsonStrategy(ExtractionStrategy):
    """Finds the first well-formed JSON value of the schema's top-level type inside prose."""

    name = "embedded_json"

    def apply(self, text: str, schema: DocumentSchema) -> ExtractionResult | None:
        for candidate in iter_json_candidates(text, schema.json_opener):
            try:
                value = json.loads(candidate)
            except RecursionError:
                # Later candidates nest inside this one
                return None
            except ValueError:
                continue
            record = schema.from_json(value)
            if record is not None:
                return record
        return None


class LabeledSectionStrategy(ExtractionStrategy):
    name = "labeled_sections"

    def apply(self, text: str, schema: DocumentSchema) -> ExtractionResult | None:
        return schema.from_labels(text)


class ParagraphStrategy(ExtractionStrategy):
    name = "paragraphs"

    def apply(self, text: str, schema: DocumentSchema) -> ExtractionResult | None:
        return schema.from_paragraphs(split_paragraphs(text))


class PositionalStrategy(ExtractionStrategy):
    name = "positional"

    def apply(self, text: str, schema: DocumentSchema) -> ExtractionResult:
        return schema.from_partitions(partition_text(text, schema.section_count))


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    StrictJsonStrategy(),
    EmbeddedJsonStrategy(),
    LabeledSectionStrategy(),
    ParagraphStrategy(),
    PositionalStrategy(),
)
