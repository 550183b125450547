"""Tests for log sanitization."""

import logging
import re

import pytest

from src.common.logging import SanitizingFilter
from src.common.logging.sanitizer import REDACTION_PLACEHOLDER, env_secrets


def _record(msg, args=None) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


@pytest.fixture
def sanitizer() -> SanitizingFilter:
    return SanitizingFilter()


class TestSanitizingFilter:
    @pytest.mark.parametrize(
        "secret",
        [
            "gsk_" + "a1B2c3D4e5" * 3,
            "AIza" + "SyD-abcdefghijklmnopqrstuvwxyz012",
            "sk-proj-" + "abcdefghij" * 3,
            "Bearer eyJhbGciOiJIUzI1NiJ9.payload",
        ],
    )
    def test_provider_credentials_redacted(self, sanitizer, secret):
        record = _record(f"Calling upstream with {secret}")

        assert sanitizer.filter(record) is True
        assert secret not in record.msg
        assert REDACTION_PLACEHOLDER in record.msg

    def test_connection_string_password_redacted(self, sanitizer):
        record = _record("Connecting to postgresql://lens:hunter2@db:5432/lens")
        sanitizer.filter(record)
        assert "hunter2" not in record.msg
        assert record.msg.endswith("db:5432/lens")

    def test_args_sanitized(self, sanitizer):
        record = _record("key %s, count %d", ("password=supersecret1", 3))
        sanitizer.filter(record)
        assert "supersecret1" not in record.args[0]
        assert record.args[1] == 3

    def test_plain_text_untouched(self, sanitizer):
        record = _record('Found 6 results for "portal gun"')
        sanitizer.filter(record)
        assert record.msg == 'Found 6 results for "portal gun"'

    def test_additional_patterns(self):
        sanitizer = SanitizingFilter(additional_patterns=[("MORTY", re.compile(r"morty-\d+"))])
        record = _record("ticket morty-42")
        sanitizer.filter(record)
        assert record.msg == f"ticket MORTY={REDACTION_PLACEHOLDER}"


class TestEnvironmentSecrets:
    def test_literal_values_from_environment(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "custom-format-key-0042")
        monkeypatch.setenv("DB_PASSWORD", "short")
        for name in ("LLM_API_KEY", "LENS_LLM_API_KEY", "GOOGLE_API_KEY", "LENS_GOOGLE_API_KEY",
                     "OPENAI_API_KEY", "LENS_OPENAI_API_KEY"):
            monkeypatch.delenv(name, raising=False)

        assert env_secrets() == ["custom-format-key-0042"]

        sanitizer = SanitizingFilter(secrets=env_secrets())
        assert sanitizer.sanitize("using custom-format-key-0042 now") == f"using {REDACTION_PLACEHOLDER} now"
