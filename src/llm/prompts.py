"""
Prompt Sets

System and user prompts for every RendererKind. Prompts are plain
``str.format`` templates: placeholders are ``{snake_case}`` names and literal
braces in JSON examples are doubled.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.llm.templates import RendererKind

logger = logging.getLogger(__name__)


QUERY_EXPANSION_SYSTEM = """You improve search queries for a database of Rick and Morty characters and locations. \
Short or vague queries are rewritten into descriptive phrases that match how those characters and locations are described."""

QUERY_EXPANSION_USER = """Rewrite this search query as a short descriptive phrase that will match relevant \
characters or locations in the Rick and Morty universe.

Query: "{query}"

Keep the original intent, say what kind of thing is being looked for (character, location, species, place type) \
and stay within one or two sentences.

Examples:
- "earth" -> "a location similar to Earth or planet Earth in the Rick and Morty universe"
- "alien" -> "an alien character or alien species in the Rick and Morty universe"
- "rick" -> "Rick Sanchez or characters similar to Rick in the Rick and Morty universe"

Reply with the rewritten query only."""


_CHARACTER_DETAILS = """- Name: {character_name}
- Status: {character_status}
- Species: {character_species}
- Type: {character_type}
- Gender: {character_gender}
- Origin: {character_origin}
- Current Location: {character_location}

Visual Appearance:
{visual_appearance}"""

_CHARACTER_EPISODES = """Episodes ({episodes_count} total, latest 10 shown):
{episodes_list}"""

CHARACTER_SYSTEM = """You write character descriptions for the Rick and Morty universe. \
Your writing is vivid, funny and faithful to the tone of the show."""

CHARACTER_USER = (
    """Write a description of the Rick and Morty character "{character_name}". Draw on what you know of the show \
and use every detail below.

Character Details:
"""
    + _CHARACTER_DETAILS
    + """

Location Information:
- Name: {location_name}
- Type: {location_type}
- Dimension: {location_dimension}

"""
    + _CHARACTER_EPISODES
    + """

Keep it to one or two paragraphs and at most 150 words. Cover the character's appearance, background and role in the show."""
)

CHARACTER_INSIGHTS_SYSTEM = """You analyse Rick and Morty characters and produce sharp observations about their \
personality, narrative role and significance."""

CHARACTER_INSIGHTS_USER = (
    """Give exactly 5 observations about the character "{character_name}" that would help someone studying them. \
Each one is a single sentence or short paragraph, grounded in the details below. Funny, sarcastic or factual \
notes are all fine and emojis are welcome.

Character Details:
"""
    + _CHARACTER_DETAILS
    + """

"""
    + _CHARACTER_EPISODES
    + """

Put each observation on its own numbered line (1. to 5.)."""
)

CHARACTER_COMPATIBILITY_SYSTEM = """You analyse how Rick and Morty characters would get along. Your assessments \
of teamwork, conflict and pressure are entertaining and consistent with the show's lore."""

CHARACTER_COMPATIBILITY_USER = """Two Rick and Morty characters are stuck together at one location. Analyse how they would get along.

Character 1: {character1_name}
- Status: {character1_status}
- Species: {character1_species}
- Type: {character1_type}
- Gender: {character1_gender}
- Origin: {character1_origin}
- Current Location: {character1_location}
- Visual Appearance: {character1_visual_appearance}
- Episodes ({character1_episodes_count} total, latest 10):
{character1_episodes_list}

Character 2: {character2_name}
- Status: {character2_status}
- Species: {character2_species}
- Type: {character2_type}
- Gender: {character2_gender}
- Origin: {character2_origin}
- Current Location: {character2_location}
- Visual Appearance: {character2_visual_appearance}
- Episodes ({character2_episodes_count} total, latest 10):
{character2_episodes_list}

Location: {location_name}
- Type: {location_type}
- Dimension: {location_dimension}
- Residents: {location_residents_count}

Answer with JSON only, using exactly this shape:

{{
  "teamWork": ["point 1", "point 2", "..."],
  "conflicts": ["point 1", "point 2", "..."],
  "breaksFirst": ["point 1", "point 2", "..."]
}}

teamWork: 5-8 points on how {character1_name} and {character2_name} would work together.
conflicts: 5-8 points on what {character1_name} and {character2_name} would fight about.
breaksFirst: 3-5 points on who cracks first under pressure and why.

Each point is a complete observation in the show's style. Do not add any text outside the JSON."""

CHARACTER_EVALUATION_SYSTEM = """You review Rick and Morty character descriptions for accuracy, completeness \
and quality against the supplied character data. Your evaluations are objective."""

CHARACTER_EVALUATION_USER = """Evaluate this character description.

Character Information:
- Name: {character_name}
- Status: {character_status}
- Species: {character_species}
- Type: {character_type}{character_type_note}
- Gender: {character_gender}
- Origin: {character_origin}{origin_note}
- Current Location: {character_location}{location_note}

Visual Appearance:
{visual_appearance}

Location Information:
- Name: {location_name}{location_name_note}
- Type: {location_type}{location_type_note}
- Dimension: {location_dimension}{dimension_note}

Episodes ({episodes_count} total, latest 10 shown):
{episodes_list}

Description:
{description}

Answer with JSON only, using exactly this shape:
{{
  "checks": {{
    "nameMentioned": true/false,
    "statusMentioned": true/false,
    "speciesMentioned": true/false,
    "typeMentioned": true/false,
    "genderMentioned": true/false,
    "originMentioned": true/false,
    "locationMentioned": true/false,
    "visualAppearanceMentioned": true/false
  }},
  "qualityChecks": {{
    "hasEpisodeContext": true/false,
    "hasLocationContext": true/false,
    "hasRickAndMortyStyle": true/false,
    "hasCharacterDepth": true/false
  }},
  "autoScore": number (0-10),
  "explanation": "short reason for the score"
}}

Scoring: name 2 points; status, species, origin, location and visual appearance 1 point each; type and gender \
0.5 each; each quality check adds 0.5. The maximum is 10. A detail counts as mentioned when it is clearly \
conveyed, even in other words. typeMentioned, originMentioned and locationMentioned are false when the value is "Unknown"."""

LOCATION_SYSTEM = """You write location descriptions for the Rick and Morty universe. \
Your writing is vivid, funny and faithful to the tone of the show."""

LOCATION_USER = """Write a description of the Rick and Morty location "{location_name}" in the chaotic sci-fi \
humour of the show. Use the type, dimension and residents to shape it.

Location Information:
Name: {location_name}
Type: {location_type}
Dimension: {location_dimension}
Total Residents: {total_resident_count}
Sample Residents ({residents_passed} of {total_resident_count}):
{residents_list}

Notes:
{residents_list_note}

Rules:
1. One paragraph.
2. Explicitly mention the name, type, dimension and total number of residents.
3. Base any population figure on {total_resident_count}, not on the sample.
4. Stay consistent with the show where you can and extrapolate where it fits."""

LOCATION_EVALUATION_SYSTEM = """You review Rick and Morty location descriptions for accuracy, completeness \
and quality. Your evaluations are objective."""

LOCATION_EVALUATION_USER = """Evaluate this location description against the instructions it was written from.

Location Information:
- Name: {location_name}
- Type: {location_type}{location_type_note}
- Dimension: {location_dimension}{dimension_note}
- Total Residents: {total_resident_count}

Description:
{description}

The description had to mention the name, type, dimension and total residents, hint at what the residents are \
like, give the place some context and sound like the show.

Answer with JSON only, using exactly this shape:

{{
  "checks": {{
    "nameMentioned": true/false,
    "typeMentioned": true/false,
    "dimensionMentioned": true/false,
    "totalResidentsMentioned": true/false
  }},
  "qualityChecks": {{
    "hasResidentInfo": true/false,
    "hasContext": true/false,
    "hasRickAndMortyStyle": true/false
  }},
  "autoScore": number (0-10),
  "explanation": "short reason for the score"
}}

Scoring: name 4 points, type 2, dimension 2, total residents 1. Resident info and context add 0.5 each and \
the show's tone adds 1. The maximum is 10. Judge meaning, not exact wording. When type or dimension is \
"Unknown" its check is false and earns nothing."""


PROMPT_SETS: dict[RendererKind, dict[str, str]] = {
    RendererKind.QUERY_EXPANSION: {
        "system": QUERY_EXPANSION_SYSTEM,
        "user": QUERY_EXPANSION_USER,
    },
    RendererKind.CHARACTER: {
        "system": CHARACTER_SYSTEM,
        "user": CHARACTER_USER,
        "insights_system": CHARACTER_INSIGHTS_SYSTEM,
        "insights_user": CHARACTER_INSIGHTS_USER,
        "compatibility_system": CHARACTER_COMPATIBILITY_SYSTEM,
        "compatibility_user": CHARACTER_COMPATIBILITY_USER,
        "evaluation_system": CHARACTER_EVALUATION_SYSTEM,
        "evaluation_user": CHARACTER_EVALUATION_USER,
    },
    RendererKind.LOCATION: {
        "system": LOCATION_SYSTEM,
        "user": LOCATION_USER,
    },
    RendererKind.LOCATION_EVALUATION: {
        "system": LOCATION_EVALUATION_SYSTEM,
        "user": LOCATION_EVALUATION_USER,
    },
}


class _PromptData(dict):
    """Leaves unknown placeholders in place so a missing value is visible in the prompt."""

    def __missing__(self, key: str) -> str:
        logger.warning(f"Prompt variable '{key}' not provided, leaving placeholder")
        return "{" + key + "}"


def render_prompt(template: str, data: Mapping[str, Any] | None = None) -> str:
    """Fill ``{name}`` placeholders from data; None values count as missing."""
    values = _PromptData({k: v for k, v in (data or {}).items() if v is not None})
    return template.format_map(values)
