"""
Common Logging Utilities

Provides log sanitization so provider keys and database credentials never
reach log output.
"""

from src.common.logging.sanitizer import (
    SanitizingFilter,
    configure_sanitized_logging,
)

__all__ = [
    "SanitizingFilter",
    "configure_sanitized_logging",
]
