"""
Query Enhancer

Short queries ("alien", "rick sanchez") embed poorly. Queries of one or two
words are rewritten into a descriptive phrase by the generation model before
embedding; longer queries are used as given.
"""

from __future__ import annotations

import logging

from src.common.telemetry import get_tracer
from src.llm.protocols import TemplateGenerator
from src.llm.templates import TemplateName

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

MAX_WORDS_TO_EXPAND = 2


def needs_expansion(query: str) -> bool:
    words = query.split()
    return 0 < len(words) <= MAX_WORDS_TO_EXPAND


class QueryEnhancer:
    """
    Expands short queries with the QUERY_EXPANSION template.

    There is no fallback: a failed generation call propagates.
    """

    def __init__(self, generator: TemplateGenerator):
        self._generator = generator

    async def enhance(self, query: str) -> str:
        """
        Return an expanded query for one- or two-word input, else the input unchanged.

        Raises:
            UpstreamCallFailure: If the expansion call fails
        """
        with tracer.start_as_current_span("search.enhance") as span:
            trimmed = query.strip()
            expand = needs_expansion(trimmed)
            span.set_attribute("search.query_words", len(trimmed.split()))
            span.set_attribute("search.enhanced", expand)
            if not expand:
                return query

            expanded = (await self._generator.generate(TemplateName.QUERY_EXPANSION, {"query": trimmed})).strip()
            logger.info(f'Query expanded from "{query}" to "{expanded}"')
            return expanded
