"""
Evaluation Normalizer

Last check on an evaluation record before it leaves the extraction engine:
every enumerated flag present and boolean, no unknown flags, score in range.
"""

from __future__ import annotations

import logging
import math

from src.exceptions import EvaluationIntegrityError
from src.extraction.models import MAX_SCORE, NO_EXPLANATION, EvaluationRecord, EvaluationSchema

logger = logging.getLogger(__name__)


class EvaluationNormalizer:
    def __init__(self, schema: EvaluationSchema):
        self._schema = schema

    def normalize(self, record: EvaluationRecord) -> EvaluationRecord:
        """
        Validate and tidy an evaluation record.

        Raises:
            EvaluationIntegrityError: If an enumerated flag is missing or not a
                bool, or the score is not a finite number
        """
        checks = self._flags(record.checks, self._schema.checks, "checks")
        quality_checks = self._flags(record.quality_checks, self._schema.quality_checks, "qualityChecks")

        score = record.auto_score
        if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
            raise EvaluationIntegrityError("autoScore", score)
        clamped = min(max(float(score), 0.0), MAX_SCORE)
        if clamped != score:
            logger.warning(f"autoScore {score} outside [0, {MAX_SCORE:g}], clamped to {clamped:g}")

        explanation = record.explanation if isinstance(record.explanation, str) else ""
        return EvaluationRecord(
            checks=checks,
            qualityChecks=quality_checks,
            autoScore=clamped,
            explanation=explanation.strip() or NO_EXPLANATION,
        )

    def _flags(self, values: dict, fields: tuple[str, ...], group: str) -> dict[str, bool]:
        for field in fields:
            value = values.get(field)
            if not isinstance(value, bool):
                raise EvaluationIntegrityError(f"{group}.{field}", value)

        unexpected = sorted(set(values) - set(fields))
        if unexpected:
            logger.warning(f"Dropping unexpected {self._schema.name} {group}: {', '.join(unexpected)}")
        return {field: values[field] for field in fields}
