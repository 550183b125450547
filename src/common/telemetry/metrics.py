"""
Multiverse Lens Metrics.

Pre-defined instruments for semantic search and structured extraction.
"""

from __future__ import annotations

from src.common.telemetry.setup import get_meter


class LensMetrics:
    """
    Metrics for the search and extraction engines.

    Tracks:
    - Search requests and their latency
    - Which cascade tier produced each extraction, per document kind
    - Generation calls that fell back to attribute-based text
    """

    def __init__(self, meter_name: str = "multiverse-lens"):
        self._meter = get_meter(meter_name)

        self._search_requests = self._meter.create_counter(
            name="search_requests",
            description="Semantic search requests",
            unit="1",
        )
        self._search_duration = self._meter.create_histogram(
            name="search_duration_ms",
            description="Semantic search duration including enhancement and embedding",
            unit="ms",
        )
        self._extraction_tier = self._meter.create_counter(
            name="extraction_tier",
            description="Extractions by winning cascade tier",
            unit="1",
        )
        self._generation_fallbacks = self._meter.create_counter(
            name="generation_fallbacks",
            description="Flows that used deterministic fallback text after a generation failure",
            unit="1",
        )

    def record_search(self, duration_ms: float, result_count: int, enhanced: bool) -> None:
        attributes = {"enhanced": enhanced, "empty": result_count == 0}
        self._search_requests.add(1, attributes)
        self._search_duration.record(duration_ms, attributes)

    def record_extraction(self, kind: str, tier: str) -> None:
        self._extraction_tier.add(1, {"kind": kind, "tier": tier})

    def record_fallback(self, flow: str) -> None:
        self._generation_fallbacks.add(1, {"flow": flow})


_lens_metrics: LensMetrics | None = None


def get_lens_metrics() -> LensMetrics:
    """Get the process-wide metrics instance."""
    global _lens_metrics
    if _lens_metrics is None:
        _lens_metrics = LensMetrics()
    return _lens_metrics
