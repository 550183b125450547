"""
Structured Output Extraction

Converts generated text into compatibility, evaluation and insight records
through a cascade of parsing strategies that always ends in a result.
"""

from src.extraction.extractor import Extraction, StructuredExtractor
from src.extraction.insights import InsightSubject, InsightSynthesizer
from src.extraction.items import MIN_ITEM_LENGTH, STOPLIST, text_to_items
from src.extraction.models import (
    CHARACTER_EVALUATION,
    LOCATION_EVALUATION,
    NO_EXPLANATION,
    CompatibilityRecord,
    DocumentKind,
    EvaluationRecord,
    EvaluationSchema,
    ExtractionResult,
    InsightList,
)
from src.extraction.normalizer import EvaluationNormalizer
from src.extraction.schemas import SECTION_PLACEHOLDER
from src.extraction.strategies import (
    DEFAULT_STRATEGIES,
    EmbeddedJsonStrategy,
    ExtractionStrategy,
    LabeledSectionStrategy,
    ParagraphStrategy,
    PositionalStrategy,
    StrictJsonStrategy,
    partition_text,
)

__all__ = [
    "CHARACTER_EVALUATION",
    "DEFAULT_STRATEGIES",
    "LOCATION_EVALUATION",
    "MIN_ITEM_LENGTH",
    "NO_EXPLANATION",
    "SECTION_PLACEHOLDER",
    "STOPLIST",
    "CompatibilityRecord",
    "DocumentKind",
    "EmbeddedJsonStrategy",
    "EvaluationNormalizer",
    "EvaluationRecord",
    "EvaluationSchema",
    "Extraction",
    "ExtractionResult",
    "ExtractionStrategy",
    "InsightList",
    "InsightSubject",
    "InsightSynthesizer",
    "LabeledSectionStrategy",
    "ParagraphStrategy",
    "PositionalStrategy",
    "StrictJsonStrategy",
    "StructuredExtractor",
    "partition_text",
    "text_to_items",
]
