"""
Pytest configuration for unit tests.

Disables telemetry so get_tracer() and get_meter() hand out no-op objects.
"""

import os

# Tracers are bound when src modules are imported, so this must precede them
os.environ["LENS_TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402

from src.knowledge.models import CharacterRecord, LocationRecord  # noqa: E402


@pytest.fixture
def rick() -> CharacterRecord:
    """Rick Sanchez as the knowledge graph returns him (GraphQL ids are strings)."""
    return CharacterRecord.model_validate(
        {
            "id": "1",
            "name": "Rick Sanchez",
            "status": "Alive",
            "species": "Human",
            "type": "",
            "gender": "Male",
            "image": "https://rickandmortyapi.com/api/character/avatar/1.jpeg",
            "origin": {"id": "1", "name": "Earth (C-137)", "type": "Planet", "dimension": "Dimension C-137"},
            "location": {"id": "3", "name": "Citadel of Ricks", "type": "Space station", "dimension": "unknown"},
            "episode": [
                {"id": str(i), "name": f"Episode {i}", "episode": f"S01E{i:02d}", "air_date": f"Day {i}"}
                for i in range(1, 13)
            ],
        }
    )


@pytest.fixture
def birdperson() -> CharacterRecord:
    return CharacterRecord.model_validate(
        {
            "id": "47",
            "name": "Birdperson",
            "status": "Dead",
            "species": "Alien",
            "type": "Bird-Person",
            "gender": "Male",
            "image": None,
            "origin": {"name": "Bird World"},
            "location": None,
            "episode": [{"id": "11", "name": "Ricksy Business", "episode": "S01E11", "air_date": "April 14, 2014"}],
        }
    )


@pytest.fixture
def citadel() -> LocationRecord:
    return LocationRecord.model_validate(
        {
            "id": "3",
            "name": "Citadel of Ricks",
            "type": "Space station",
            "dimension": None,
            "residents": [
                {
                    "id": str(i),
                    "name": f"Rick {i}",
                    "status": "Alive",
                    "species": "Human",
                    "type": "",
                    "gender": "Male",
                    "origin": {"name": "Earth"},
                    "location": {"name": "Citadel of Ricks"},
                }
                for i in range(1, 26)
            ],
        }
    )
