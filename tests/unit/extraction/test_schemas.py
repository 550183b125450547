"""Tests for schema coercion helpers and evaluation JSON handling."""

from __future__ import annotations

import math

import pytest

from src.extraction.models import CHARACTER_EVALUATION
from src.extraction.schemas import (
    EvaluationDocumentSchema,
    InsightsSchema,
    coerce_bool,
    coerce_score,
    normalize_key,
)


class TestNormalizeKey:
    @pytest.mark.parametrize("key", ["teamWork", "team_work", "Team Work", "TEAM-WORK"])
    def test_variants_collapse(self, key):
        assert normalize_key(key) == "teamwork"


class TestCoerceBool:
    @pytest.mark.parametrize("value", [True, 1, "true", " Yes ", "'pass'", "✅"])
    def test_truthy(self, value):
        assert coerce_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "No", "❌"])
    def test_falsy(self, value):
        assert coerce_bool(value) is False

    @pytest.mark.parametrize("value", [None, 2, "maybe", [], {}])
    def test_not_boolean(self, value):
        assert coerce_bool(value) is None


class TestCoerceScore:
    @pytest.mark.parametrize("value,expected", [(7, 7.0), (7.5, 7.5), ("8/10", 8.0), ("score: -2", -2.0)])
    def test_numbers(self, value, expected):
        assert coerce_score(value) == expected

    @pytest.mark.parametrize("value", [True, "n/a", None, math.inf, float("nan")])
    def test_non_scores(self, value):
        assert coerce_score(value) is None


class TestEvaluationDocumentSchema:
    def test_unrecognized_object_defers(self):
        assert EvaluationDocumentSchema(CHARACTER_EVALUATION).from_json({"foo": 1}) is None

    def test_unknown_nested_flags_are_kept(self):
        schema = EvaluationDocumentSchema(CHARACTER_EVALUATION)
        record = schema.from_json({"checks": {"nameMentioned": True, "catchphraseMentioned": "yes"}})
        assert record.checks["catchphraseMentioned"] is True
        assert record.checks["statusMentioned"] is False

    def test_non_boolean_flag_becomes_false(self, caplog):
        schema = EvaluationDocumentSchema(CHARACTER_EVALUATION)
        record = schema.from_json({"checks": {"nameMentioned": "sort of"}})
        assert record.checks["nameMentioned"] is False
        assert "non-boolean" in caplog.text


class TestInsightsSchema:
    def test_json_entries_may_be_objects(self):
        schema = InsightsSchema(count=2)
        record = schema.from_json([{"text": "First real insight"}, {"insight": "Second real insight"}, 3])
        assert record.insights == ["First real insight", "Second real insight"]

    def test_empty_json_list_defers(self):
        assert InsightsSchema().from_json([]) is None
