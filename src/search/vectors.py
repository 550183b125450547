"""pgvector literal encoding."""

from __future__ import annotations

from collections.abc import Sequence

from src.exceptions import DimensionMismatchError


def to_pgvector(values: Sequence[float]) -> str:
    """Encode floats as a pgvector text literal, e.g. ``[0.1,0.2]``."""
    return "[" + ",".join(repr(float(v)) for v in values) + "]"


def require_dimension(values: Sequence[float], dimension: int) -> None:
    """Raise DimensionMismatchError unless values has exactly ``dimension`` elements."""
    if len(values) != dimension:
        raise DimensionMismatchError(dimension, len(values))
