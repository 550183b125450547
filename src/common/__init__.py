"""
Shared infrastructure: sanitized logging, OpenTelemetry helpers and the
PostgreSQL connection pool.
"""

from src.common import logging, storage, telemetry  # noqa: F401
