"""
Generation Templates

A generation template binds a closed TemplateName to a model, sampling
settings and the system/user prompts of one RendererKind. Templates are
loaded from JSON once at startup and validated eagerly, so a call site can
never ask for a template or prompt that does not exist.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.exceptions import TemplateConfigError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "llm_config.json"


class TemplateName(str, Enum):
    """Every generation call the system makes."""

    QUERY_EXPANSION = "query_expansion"
    CHARACTER_DESCRIPTION = "character_description_generation"
    LOCATION_DESCRIPTION = "location_description_generation"
    CHARACTER_INSIGHTS = "character_insights_generation"
    CHARACTER_COMPATIBILITY = "character_compatibility_generation"
    CHARACTER_EVALUATION = "character_description_evaluation"
    LOCATION_EVALUATION = "location_description_evaluation"


class RendererKind(str, Enum):
    """Prompt sets a template can draw its system and user prompts from."""

    QUERY_EXPANSION = "query_expansion"
    CHARACTER = "character"
    LOCATION = "location"
    LOCATION_EVALUATION = "location_evaluation"


class GenerationTemplate(BaseModel):
    """One entry of llm_config.json."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    template_name: TemplateName
    model: str = Field(min_length=1)
    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)
    renderer: RendererKind
    system_prompt: str = Field(default="system", min_length=1)
    user_prompt: str = Field(default="user", min_length=1)


class TemplateRegistry:
    """
    Immutable lookup of validated generation templates.

    Construction checks that every TemplateName is configured exactly once
    and that each template's prompt keys exist in its renderer's prompt set.
    """

    def __init__(
        self,
        templates: list[GenerationTemplate],
        prompt_sets: Mapping[RendererKind, Mapping[str, str]],
    ):
        by_name: dict[TemplateName, GenerationTemplate] = {}
        for template in templates:
            if template.template_name in by_name:
                raise TemplateConfigError(template.template_name.value, "configured more than once")
            prompts = prompt_sets.get(template.renderer, {})
            for key in (template.system_prompt, template.user_prompt):
                if key not in prompts:
                    raise TemplateConfigError(
                        template.template_name.value,
                        f"prompt '{key}' not defined for renderer '{template.renderer.value}'",
                    )
            by_name[template.template_name] = template

        missing = [name.value for name in TemplateName if name not in by_name]
        if missing:
            raise TemplateConfigError(", ".join(missing), "no configuration entry")

        self._templates = MappingProxyType(by_name)
        self._prompt_sets = MappingProxyType(
            {kind: MappingProxyType(dict(prompts)) for kind, prompts in prompt_sets.items()}
        )

    def get(self, name: TemplateName) -> GenerationTemplate:
        return self._templates[name]

    def system_prompt(self, name: TemplateName) -> str:
        template = self._templates[name]
        return self._prompt_sets[template.renderer][template.system_prompt]

    def user_prompt(self, name: TemplateName) -> str:
        template = self._templates[name]
        return self._prompt_sets[template.renderer][template.user_prompt]

    def __len__(self) -> int:
        return len(self._templates)


def parse_templates(raw: Any) -> list[GenerationTemplate]:
    """Validate the decoded JSON document into GenerationTemplate entries."""
    if not isinstance(raw, list):
        raise TemplateConfigError("<root>", "template configuration must be a JSON array")

    templates = []
    for index, entry in enumerate(raw):
        name = entry.get("template_name", f"#{index}") if isinstance(entry, dict) else f"#{index}"
        try:
            templates.append(GenerationTemplate.model_validate(entry))
        except ValidationError as e:
            raise TemplateConfigError(str(name), str(e)) from e
    return templates


def load_template_registry(
    path: Path | None = None,
    prompt_sets: Mapping[RendererKind, Mapping[str, str]] | None = None,
) -> TemplateRegistry:
    """
    Load and validate the template configuration file.

    Args:
        path: JSON file (defaults to the bundled llm_config.json)
        prompt_sets: Prompt sets to validate against (defaults to the bundled prompts)

    Raises:
        TemplateConfigError: On unreadable JSON or any invalid template
    """
    if prompt_sets is None:
        from src.llm.prompts import PROMPT_SETS

        prompt_sets = PROMPT_SETS

    config_path = path or DEFAULT_TEMPLATE_PATH
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TemplateConfigError(str(config_path), f"cannot load template file: {e}") from e

    registry = TemplateRegistry(parse_templates(raw), prompt_sets)
    logger.debug(f"Loaded {len(registry)} generation templates from {config_path}")
    return registry
