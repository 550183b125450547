"""
Prompt Data

Builds the placeholder values for each generation template from knowledge
graph records. Missing attributes read "Unknown"; evaluation prompts flag
them so the evaluator does not penalize their absence.
"""

from __future__ import annotations

from typing import Any

from src.knowledge.models import UNKNOWN, CharacterRecord, EpisodeRef, LocationRecord

MAX_EPISODES = 10
MAX_RESIDENTS = 20
UNKNOWN_NOTE = ' (may be "Unknown")'
NO_EPISODES = "No episodes available."
NO_RESIDENTS = "No residents listed."
NO_VISUAL = "No visual appearance data available."


def _or_unknown(value: str | None) -> str:
    return value or UNKNOWN


def _unknown_note(value: str | None) -> str:
    return UNKNOWN_NOTE if not value or value == UNKNOWN else ""


def recent_episodes(record: CharacterRecord) -> list[EpisodeRef]:
    """The latest MAX_EPISODES episodes, most recent first."""
    return list(reversed(record.episodes[-MAX_EPISODES:]))


def format_episodes(record: CharacterRecord) -> str:
    lines = [
        f'{i}. "{ep.name}" ({ep.episode}) - Aired: {ep.air_date or UNKNOWN}'
        for i, ep in enumerate(recent_episodes(record), start=1)
    ]
    return "\n".join(lines) or NO_EPISODES


def character_prompt_data(record: CharacterRecord, visual_appearance: str) -> dict[str, Any]:
    """Values for the character description and insights templates."""
    location = record.location
    return {
        "character_name": record.name,
        "character_status": _or_unknown(record.status),
        "character_species": _or_unknown(record.species),
        "character_type": _or_unknown(record.type),
        "character_gender": _or_unknown(record.gender),
        "character_origin": record.origin_name,
        "character_location": record.location_name,
        "visual_appearance": visual_appearance or NO_VISUAL,
        "location_name": _or_unknown(location.name if location else None),
        "location_type": _or_unknown(location.type if location else None),
        "location_dimension": _or_unknown(location.dimension if location else None),
        "episodes_count": len(record.episodes),
        "episodes_list": format_episodes(record),
    }


def character_evaluation_prompt_data(
    record: CharacterRecord,
    visual_appearance: str,
    description: str,
) -> dict[str, Any]:
    data = character_prompt_data(record, visual_appearance)
    data.update(
        character_type_note=_unknown_note(record.type),
        origin_note=_unknown_note(data["character_origin"]),
        location_note=_unknown_note(data["character_location"]),
        location_name_note=_unknown_note(data["location_name"]),
        location_type_note=_unknown_note(data["location_type"]),
        dimension_note=_unknown_note(data["location_dimension"]),
        description=description,
    )
    return data


def compatibility_prompt_data(
    first: CharacterRecord,
    first_appearance: str,
    second: CharacterRecord,
    second_appearance: str,
    location: LocationRecord,
) -> dict[str, Any]:
    """Values for the two-character compatibility template."""
    data: dict[str, Any] = {}
    for prefix, record, appearance in (
        ("character1", first, first_appearance),
        ("character2", second, second_appearance),
    ):
        data.update(
            {
                f"{prefix}_name": record.name,
                f"{prefix}_status": _or_unknown(record.status),
                f"{prefix}_species": _or_unknown(record.species),
                f"{prefix}_type": _or_unknown(record.type),
                f"{prefix}_gender": _or_unknown(record.gender),
                f"{prefix}_origin": record.origin_name,
                f"{prefix}_location": record.location_name,
                f"{prefix}_visual_appearance": appearance or NO_VISUAL,
                f"{prefix}_episodes_count": len(record.episodes),
                f"{prefix}_episodes_list": format_episodes(record),
            }
        )
    data.update(
        location_name=location.name,
        location_type=_or_unknown(location.type),
        location_dimension=_or_unknown(location.dimension),
        location_residents_count=len(location.residents),
    )
    return data


def format_residents(record: LocationRecord) -> str:
    lines = []
    for i, resident in enumerate(record.residents[:MAX_RESIDENTS], start=1):
        kind = f" ({resident.type})" if resident.type else ""
        origin = _or_unknown(resident.origin.name if resident.origin else None)
        current = _or_unknown(resident.location.name if resident.location else None)
        lines.append(
            f"{i}. {resident.name} - {_or_unknown(resident.status)} {_or_unknown(resident.species)}{kind}, "
            f"{_or_unknown(resident.gender)}, from {origin}, currently at {current}"
        )
    return "\n".join(lines) or NO_RESIDENTS


def location_prompt_data(record: LocationRecord) -> dict[str, Any]:
    """Values for the location description template."""
    total = len(record.residents)
    passed = min(total, MAX_RESIDENTS)
    note = (
        "No known residents in this location."
        if total == 0
        else f"Showing {passed} sample residents out of {total} total."
    )
    return {
        "location_name": record.name,
        "location_type": _or_unknown(record.type),
        "location_dimension": _or_unknown(record.dimension),
        "total_resident_count": total,
        "residents_passed": passed,
        "residents_list": format_residents(record),
        "residents_list_note": note,
    }


def location_evaluation_prompt_data(record: LocationRecord, description: str) -> dict[str, Any]:
    data = location_prompt_data(record)
    data.update(
        location_type_note=_unknown_note(record.type),
        dimension_note=_unknown_note(record.dimension),
        description=description,
    )
    return data
