"""
Structured Extractor

Turns free-form generated text into a record of the requested document kind.
Extraction never fails: the strategy cascade ends in a positional split that
always produces a fully populated record.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from src.common.telemetry import get_lens_metrics, get_tracer
from src.extraction.insights import InsightSubject, InsightSynthesizer
from src.extraction.models import CHARACTER_EVALUATION, DocumentKind, EvaluationSchema, ExtractionResult
from src.extraction.schemas import CompatibilitySchema, DocumentSchema, EvaluationDocumentSchema, InsightsSchema
from src.extraction.strategies import DEFAULT_STRATEGIES, ExtractionStrategy, PositionalStrategy

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class Extraction:
    """A record and the name of the strategy that produced it."""

    record: ExtractionResult
    tier: str


class StructuredExtractor:
    """
    Applies the parsing cascade for a document kind.

    Args:
        strategies: Ordered strategies; the last must be a PositionalStrategy
        synthesizer: Pads insight lists that come up short
        insight_count: Length of every insight list
    """

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
        synthesizer: InsightSynthesizer | None = None,
        insight_count: int = 5,
    ):
        if not strategies or not isinstance(strategies[-1], PositionalStrategy):
            raise ValueError("The last extraction strategy must be a PositionalStrategy")
        self._strategies = tuple(strategies)
        self._synthesizer = synthesizer or InsightSynthesizer()
        self._insight_count = insight_count

    def schema_for(
        self,
        kind: DocumentKind,
        evaluation: EvaluationSchema = CHARACTER_EVALUATION,
        subject: InsightSubject | None = None,
    ) -> DocumentSchema:
        if kind == DocumentKind.COMPATIBILITY:
            return CompatibilitySchema()
        if kind == DocumentKind.EVALUATION:
            return EvaluationDocumentSchema(evaluation)
        return InsightsSchema(subject, self._insight_count, self._synthesizer)

    def extract_with_tier(
        self,
        kind: DocumentKind,
        raw_text: str | None,
        *,
        evaluation: EvaluationSchema = CHARACTER_EVALUATION,
        subject: InsightSubject | None = None,
    ) -> Extraction:
        """
        Run the cascade and report which strategy won.

        Args:
            kind: Document kind to produce
            raw_text: Generated text (None is treated as empty)
            evaluation: Enumerated fields, for EVALUATION
            subject: Known attributes used to pad INSIGHTS

        Returns:
            Extraction with a fully populated record
        """
        text = raw_text or ""
        schema = self.schema_for(kind, evaluation, subject)

        with tracer.start_as_current_span("extraction.extract") as span:
            span.set_attribute("extraction.kind", kind.value)
            span.set_attribute("extraction.text_length", len(text))
            for strategy in self._strategies:
                record = strategy.apply(text, schema)
                if record is not None:
                    break
            span.set_attribute("extraction.tier", strategy.name)

        if strategy.name == PositionalStrategy.name:
            logger.warning(f"{kind.value} extraction fell back to positional split ({len(text)} chars)")
        else:
            logger.debug(f"{kind.value} extracted by {strategy.name}")
        get_lens_metrics().record_extraction(kind.value, strategy.name)
        return Extraction(record=record, tier=strategy.name)

    def extract(
        self,
        kind: DocumentKind,
        raw_text: str | None,
        *,
        evaluation: EvaluationSchema = CHARACTER_EVALUATION,
        subject: InsightSubject | None = None,
    ) -> ExtractionResult:
        """Return a fully populated record of the requested kind. Never raises on content."""
        return self.extract_with_tier(kind, raw_text, evaluation=evaluation, subject=subject).record
