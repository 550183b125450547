"""Tests for the lens CLI: output and exit codes."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from src import __version__
from src.cli.main import app
from src.content import DescriptionResult
from src.exceptions import EntityNotFoundError, UpstreamCallFailure
from src.extraction import EvaluationRecord

runner = CliRunner()


@pytest.fixture
def ctx(monkeypatch):
    """Replace the application context used by the content commands."""
    fake = MagicMock()

    @asynccontextmanager
    async def opener(*args, **kwargs):
        yield fake

    monkeypatch.setattr("src.cli.commands.content.open_context", opener)
    return fake


def _evaluation() -> EvaluationRecord:
    return EvaluationRecord(
        checks={"nameMentioned": True, "typeMentioned": False},
        qualityChecks={"hasContext": True},
        autoScore=7.0,
        explanation="Solid.",
    )


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"multiverse-lens version {__version__}" in result.output


# =============================================================================
# extract
# =============================================================================


class TestExtract:
    def test_extract_from_file(self, tmp_path):
        document = {"teamWork": ["Portal runs"], "conflicts": [], "breaksFirst": ["Morty"]}
        source = tmp_path / "response.txt"
        source.write_text(json.dumps(document), encoding="utf-8")

        result = runner.invoke(app, ["extract", "compatibility", str(source)])

        assert result.exit_code == 0
        assert json.loads(result.output) == document

    def test_extract_from_stdin(self):
        result = runner.invoke(
            app,
            ["extract", "insights"],
            input="1. Rick hides grief behind sarcasm.\n2. Morty is braver than he looks.\n",
        )

        assert result.exit_code == 0
        insights = json.loads(result.output)["insights"]
        assert len(insights) == 5
        assert insights[0] == "Rick hides grief behind sarcasm."

    def test_reports_tier(self, tmp_path):
        source = tmp_path / "response.txt"
        source.write_text("no structure at all", encoding="utf-8")

        result = runner.invoke(app, ["extract", "evaluation", str(source), "--location", "--tier"])

        assert result.exit_code == 0
        assert "positional" in result.output

    def test_unknown_kind_is_usage_error(self):
        result = runner.invoke(app, ["extract", "poem"], input="text")
        assert result.exit_code == 2


# =============================================================================
# Missing input
# =============================================================================


class TestMissingInput:
    @pytest.mark.parametrize(
        "args",
        [
            ["describe", "character"],
            ["describe", "location", "abc"],
            ["insights", "0"],
            ["compatibility", "1", "2"],
            ["search", "   "],
            ["evaluate", "location", "3", "--description", "  "],
        ],
    )
    def test_exits_with_usage_code(self, args, ctx):
        result = runner.invoke(app, args)

        assert result.exit_code == 2
        assert "Missing required parameter" in result.output


# =============================================================================
# Content commands
# =============================================================================


class TestContentCommands:
    def test_describe_marks_fallback(self, ctx):
        ctx.descriptions.describe_character = AsyncMock(
            return_value=DescriptionResult("Rick Sanchez is an alive Human.", generated=False)
        )

        result = runner.invoke(app, ["describe", "character", "1"])

        assert result.exit_code == 0
        assert "Character (fallback)" in result.output
        ctx.descriptions.describe_character.assert_awaited_once_with(1)

    def test_not_found_exits_with_failure(self, ctx):
        ctx.descriptions.describe_location = AsyncMock(side_effect=EntityNotFoundError("location", 9999))

        result = runner.invoke(app, ["describe", "location", "9999"])

        assert result.exit_code == 1

    def test_evaluation_upstream_failure_exits_with_failure(self, ctx):
        ctx.evaluation.evaluate_location = AsyncMock(
            side_effect=UpstreamCallFailure("generation", "503 Service Unavailable")
        )

        result = runner.invoke(app, ["evaluate", "location", "3", "-d", "A station full of Ricks."])

        assert result.exit_code == 1

    def test_evaluate_generates_description_when_none_given(self, ctx):
        ctx.descriptions.describe_character = AsyncMock(
            return_value=DescriptionResult("Rick is a scientist.", generated=True)
        )
        ctx.evaluation.evaluate_character = AsyncMock(return_value=_evaluation())

        result = runner.invoke(app, ["evaluate", "character", "1", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["description"] == "Rick is a scientist."
        assert payload["evaluation"]["autoScore"] == 7.0
        ctx.evaluation.evaluate_character.assert_awaited_once_with(1, "Rick is a scientist.")

    def test_evaluate_reads_description_file(self, ctx, tmp_path):
        description = tmp_path / "description.txt"
        description.write_text("The Citadel is home to Ricks.", encoding="utf-8")
        ctx.evaluation.evaluate_location = AsyncMock(return_value=_evaluation())

        result = runner.invoke(app, ["evaluate", "location", "3", "--file", str(description)])

        assert result.exit_code == 0
        assert "Solid." in result.output
        assert "nameMentioned" in result.output
        ctx.descriptions.describe_location.assert_not_called()
