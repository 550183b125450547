"""
Text to Items

Turns a block of generated text into list items. Bullets, numbers and
emoji-led lines start new items; unmarked lines continue the current one.
Text without any markers is split into sentences.
"""

from __future__ import annotations

import re

MIN_ITEM_LENGTH = 10

# Fragments that are connective tissue, not content
STOPLIST = frozenset(
    {
        "however",
        "therefore",
        "moreover",
        "furthermore",
        "additionally",
        "also",
        "meanwhile",
        "overall",
        "in conclusion",
        "in summary",
        "in short",
        "on the other hand",
        "that said",
        "for example",
        "as a result",
        "consequently",
        "nevertheless",
        "finally",
    }
)

EMOJI = r"[\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF]\uFE0F?"

# Marker that is stripped from the item: bullet, "1." / "1)", "a)"
_STRIPPED_MARKER = re.compile(r"^\s*(?:[-*•▪◦‣+]|\d+[.)]|[a-zA-Z]\))\s+")
# Emoji-led lines start an item but keep the emoji
_EMOJI_LEAD = re.compile(rf"^\s*{EMOJI}")
_INLINE_BULLET = re.compile(r"\s*•\s*")
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")
_EMPHASIS = re.compile(r"^[*_]+|[*_]+$")


def clean_item(text: str) -> str:
    """Collapse whitespace and strip markdown emphasis from the ends."""
    text = " ".join(text.split())
    return _EMPHASIS.sub("", text).strip()


def is_content(item: str) -> bool:
    """True if the item is long enough and not a stoplisted connective."""
    if len(item) < MIN_ITEM_LENGTH:
        return False
    normalized = re.sub(r"[^\w\s]", "", item).strip().lower()
    return normalized not in STOPLIST


def split_marked_lines(text: str) -> list[str] | None:
    """
    Split on line-leading markers.

    Returns None when no line carries a marker.
    """
    lines = text.splitlines()
    if not any(_STRIPPED_MARKER.match(line) or _EMOJI_LEAD.match(line) for line in lines):
        return None

    items: list[str] = []
    current: list[str] | None = None
    for line in lines:
        if not line.strip():
            current = None
            continue
        marker = _STRIPPED_MARKER.match(line)
        if marker or _EMOJI_LEAD.match(line):
            current = [line[marker.end():] if marker else line.strip()]
            items.append("")
        elif current is None:
            current = [line.strip()]
            items.append("")
        else:
            current.append(line.strip())
        items[-1] = " ".join(current)
    return items


def split_sentences(text: str) -> list[str]:
    return [s for s in _SENTENCE_END.split(text.strip()) if s.strip()]


def text_to_items(text: str) -> list[str]:
    """
    Convert a text block into content items.

    Marker-delimited lines win; then inline bullets; then sentences. Items
    shorter than MIN_ITEM_LENGTH and stoplisted fragments are dropped.
    """
    if not text or not text.strip():
        return []

    pieces = split_marked_lines(text)
    if pieces is None and "•" in text:
        pieces = _INLINE_BULLET.split(text)
    if pieces is None:
        pieces = split_sentences(text)

    items = [clean_item(p) for p in pieces]
    return [item for item in items if is_content(item)]
