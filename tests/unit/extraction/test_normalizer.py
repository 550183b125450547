"""Tests for EvaluationNormalizer."""

from __future__ import annotations

import pytest

from src.exceptions import EvaluationIntegrityError
from src.extraction.models import LOCATION_EVALUATION, NO_EXPLANATION, EvaluationRecord
from src.extraction.normalizer import EvaluationNormalizer


@pytest.fixture
def normalizer():
    return EvaluationNormalizer(LOCATION_EVALUATION)


def _record(**overrides):
    values = {
        "checks": dict.fromkeys(LOCATION_EVALUATION.checks, True),
        "quality_checks": dict.fromkeys(LOCATION_EVALUATION.quality_checks, False),
        "auto_score": 7.0,
        "explanation": "Solid.",
    }
    values.update(overrides)
    # Bypass validation to simulate records built outside the extractor
    return EvaluationRecord.model_construct(**values)


class TestEvaluationNormalizer:
    def test_valid_record_unchanged(self, normalizer):
        result = normalizer.normalize(_record())
        assert result.checks == dict.fromkeys(LOCATION_EVALUATION.checks, True)
        assert result.auto_score == 7.0
        assert result.explanation == "Solid."

    def test_missing_flag_raises(self, normalizer):
        checks = dict.fromkeys(LOCATION_EVALUATION.checks, True)
        del checks["dimensionMentioned"]

        with pytest.raises(EvaluationIntegrityError) as exc_info:
            normalizer.normalize(_record(checks=checks))
        assert exc_info.value.field == "checks.dimensionMentioned"

    def test_non_boolean_flag_raises(self, normalizer):
        quality = dict.fromkeys(LOCATION_EVALUATION.quality_checks, False)
        quality["hasContext"] = "yes"

        with pytest.raises(EvaluationIntegrityError) as exc_info:
            normalizer.normalize(_record(quality_checks=quality))
        assert exc_info.value.code == "EVALUATION_INTEGRITY"

    def test_unknown_flags_dropped(self, normalizer, caplog):
        checks = dict.fromkeys(LOCATION_EVALUATION.checks, True) | {"catchphraseMentioned": True}

        result = normalizer.normalize(_record(checks=checks))

        assert "catchphraseMentioned" not in result.checks
        assert "catchphraseMentioned" in caplog.text

    @pytest.mark.parametrize("score,expected", [(-3, 0.0), (14.5, 10.0), (10, 10.0), (0, 0.0)])
    def test_score_clamped(self, normalizer, score, expected):
        assert normalizer.normalize(_record(auto_score=score)).auto_score == expected

    @pytest.mark.parametrize("score", ["8", None, float("nan"), True])
    def test_invalid_score_raises(self, normalizer, score):
        with pytest.raises(EvaluationIntegrityError):
            normalizer.normalize(_record(auto_score=score))

    def test_blank_explanation_defaulted(self, normalizer):
        assert normalizer.normalize(_record(explanation="   ")).explanation == NO_EXPLANATION
