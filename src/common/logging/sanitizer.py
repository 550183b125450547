"""
Log Sanitization

Redacts credentials before log records reach a handler.

Three services hold credentials: the OpenAI-compatible generation endpoint,
Google's embedding API and PostgreSQL. Keys are caught two ways: by their
known formats, and by the literal values currently set in the environment,
which covers keys whose format the patterns do not know.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from re import Pattern
from typing import Any

REDACTION_PLACEHOLDER = "[REDACTED]"

# Shorter values are too likely to occur in ordinary text
MIN_SECRET_LENGTH = 8

# Variables read by LensConfig and StorageConfig that hold credentials
SECRET_ENV_VARS = (
    "GROQ_API_KEY",
    "LLM_API_KEY",
    "LENS_LLM_API_KEY",
    "GOOGLE_API_KEY",
    "LENS_GOOGLE_API_KEY",
    "OPENAI_API_KEY",
    "LENS_OPENAI_API_KEY",
    "DB_PASSWORD",
)

SENSITIVE_PATTERNS: list[tuple[str, Pattern[str]]] = [
    ("API_KEY", re.compile(r"(api[_-]?key|apikey)\s*[=:]\s*['\"]?[\w\-]{20,}['\"]?", re.IGNORECASE)),
    ("SECRET", re.compile(r"(secret|password|passwd|pwd)\s*[=:]\s*['\"]?[^\s'\"]{8,}['\"]?", re.IGNORECASE)),
    # Groq: gsk_...
    ("GROQ_KEY", re.compile(r"gsk_[a-zA-Z0-9]{20,}")),
    # Google: AIza...
    ("GOOGLE_KEY", re.compile(r"AIza[0-9A-Za-z\-_]{30,}")),
    # OpenAI: sk-... or sk-proj-...
    ("OPENAI_KEY", re.compile(r"sk-[a-zA-Z0-9\-]{20,}", re.IGNORECASE)),
    ("PG_CONN", re.compile(r"postgres(?:ql)?://[^:\s]+:[^@\s]+@", re.IGNORECASE)),
    ("BEARER", re.compile(r"Bearer\s+[a-zA-Z0-9\-_\.]+", re.IGNORECASE)),
]


def env_secrets(names: Iterable[str] = SECRET_ENV_VARS) -> list[str]:
    """Values of the credential variables that are set and long enough to redact."""
    values = (os.environ.get(name, "").strip() for name in names)
    return sorted({v for v in values if len(v) >= MIN_SECRET_LENGTH}, key=len, reverse=True)


class SanitizingFilter(logging.Filter):
    """
    Logging filter that rewrites the message and string args of each record.

    Args:
        name: Filter name (passed to logging.Filter)
        additional_patterns: Extra (label, pattern) pairs redacted as ``LABEL=[REDACTED]``
        secrets: Literal values redacted wherever they appear
        redaction_placeholder: Replacement text
    """

    def __init__(
        self,
        name: str = "",
        additional_patterns: list[tuple[str, Pattern[str]]] | None = None,
        secrets: Iterable[str] = (),
        redaction_placeholder: str = REDACTION_PLACEHOLDER,
    ):
        super().__init__(name)
        self._patterns = SENSITIVE_PATTERNS + list(additional_patterns or [])
        self._secrets = tuple(secrets)
        self._placeholder = redaction_placeholder

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = self.sanitize(str(record.msg))
        if isinstance(record.args, dict):
            record.args = {k: self._sanitize_arg(v) for k, v in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(self._sanitize_arg(arg) for arg in record.args)
        return True

    def sanitize(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, self._placeholder)
        for label, pattern in self._patterns:
            text = pattern.sub(f"{label}={self._placeholder}", text)
        return text

    def _sanitize_arg(self, value: Any) -> Any:
        return self.sanitize(value) if isinstance(value, str) else value


def configure_sanitized_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    additional_patterns: list[tuple[str, Pattern[str]]] | None = None,
) -> SanitizingFilter:
    """
    Configure the root logger and attach a SanitizingFilter to it and its handlers.

    Credential values present in the environment at call time are redacted
    literally as well as by pattern.

    Args:
        level: Logging level (int or level name such as "DEBUG")
        format_string: Log format (defaults to time, logger, level, message)
        additional_patterns: Extra patterns to redact

    Returns:
        The installed filter
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format=format_string or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    sanitizing_filter = SanitizingFilter(additional_patterns=additional_patterns, secrets=env_secrets())
    root_logger = logging.getLogger()
    root_logger.addFilter(sanitizing_filter)
    for handler in root_logger.handlers:
        handler.addFilter(sanitizing_filter)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return sanitizing_filter
