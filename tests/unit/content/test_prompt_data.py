"""Tests for prompt data builders, checked against the bundled templates."""

from __future__ import annotations

from string import Formatter

import pytest

from src.content.prompt_data import (
    MAX_RESIDENTS,
    NO_EPISODES,
    UNKNOWN_NOTE,
    character_evaluation_prompt_data,
    character_prompt_data,
    compatibility_prompt_data,
    format_episodes,
    location_evaluation_prompt_data,
    location_prompt_data,
    recent_episodes,
)
from src.llm.templates import TemplateName, load_template_registry


def _placeholders(template: str) -> set[str]:
    return {name for _, name, _, _ in Formatter().parse(template) if name}


@pytest.fixture(scope="module")
def registry():
    return load_template_registry()


class TestEpisodes:
    def test_latest_ten_most_recent_first(self, rick):
        episodes = recent_episodes(rick)
        assert [e.episode for e in episodes] == [f"S01E{i:02d}" for i in range(12, 2, -1)]

    def test_format(self, rick):
        assert format_episodes(rick).splitlines()[0] == '1. "Episode 12" (S01E12) - Aired: Day 12'

    def test_no_episodes(self, rick):
        assert format_episodes(rick.model_copy(update={"episodes": []})) == NO_EPISODES


class TestCharacterData:
    def test_unknown_values_filled(self, birdperson):
        data = character_prompt_data(birdperson, "Feathered humanoid")
        assert data["character_type"] == "Bird-Person"
        assert data["character_location"] == "Unknown"
        assert data["location_dimension"] == "Unknown"
        assert data["episodes_count"] == 1

    def test_evaluation_notes_flag_unknowns(self, rick, birdperson):
        rick_data = character_evaluation_prompt_data(rick, "", "A description")
        bird_data = character_evaluation_prompt_data(birdperson, "", "A description")
        assert rick_data["character_type_note"] == UNKNOWN_NOTE
        assert rick_data["origin_note"] == ""
        assert bird_data["location_note"] == UNKNOWN_NOTE
        assert bird_data["character_type_note"] == ""


class TestLocationData:
    def test_residents_capped(self, citadel):
        data = location_prompt_data(citadel)
        assert data["total_resident_count"] == 25
        assert data["residents_passed"] == MAX_RESIDENTS
        assert len(data["residents_list"].splitlines()) == MAX_RESIDENTS
        assert data["residents_list_note"] == "Showing 20 sample residents out of 25 total."
        assert data["residents_list"].splitlines()[0] == (
            "1. Rick 1 - Alive Human, Male, from Earth, currently at Citadel of Ricks"
        )

    def test_empty_location(self, citadel):
        data = location_prompt_data(citadel.model_copy(update={"residents": []}))
        assert data["residents_list_note"] == "No known residents in this location."
        assert data["residents_list"] == "No residents listed."

    def test_evaluation_notes(self, citadel):
        data = location_evaluation_prompt_data(citadel, "desc")
        assert data["dimension_note"] == UNKNOWN_NOTE
        assert data["location_type_note"] == ""


class TestTemplatesFullyRendered:
    """Each builder supplies every placeholder its templates use."""

    def _check(self, registry, name, data):
        for prompt in (registry.system_prompt(name), registry.user_prompt(name)):
            assert _placeholders(prompt) <= data.keys(), _placeholders(prompt) - data.keys()

    def test_character_templates(self, registry, rick):
        data = character_prompt_data(rick, "Lab coat")
        self._check(registry, TemplateName.CHARACTER_DESCRIPTION, data)
        self._check(registry, TemplateName.CHARACTER_INSIGHTS, data)

    def test_character_evaluation(self, registry, rick):
        self._check(registry, TemplateName.CHARACTER_EVALUATION, character_evaluation_prompt_data(rick, "x", "y"))

    def test_compatibility(self, registry, rick, birdperson, citadel):
        data = compatibility_prompt_data(rick, "a", birdperson, "b", citadel)
        self._check(registry, TemplateName.CHARACTER_COMPATIBILITY, data)

    def test_location_templates(self, registry, citadel):
        self._check(registry, TemplateName.LOCATION_DESCRIPTION, location_prompt_data(citadel))
        self._check(registry, TemplateName.LOCATION_EVALUATION, location_evaluation_prompt_data(citadel, "y"))

    def test_query_expansion(self, registry):
        self._check(registry, TemplateName.QUERY_EXPANSION, {"query": "alien"})
