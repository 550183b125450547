"""
Template Generator

Renders a named template's prompts and calls the generation provider with
the template's model settings.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.common.telemetry import get_tracer
from src.llm.prompts import render_prompt
from src.llm.protocols import GenerationProvider
from src.llm.templates import TemplateName, TemplateRegistry

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class TextGenerator:
    """Binds the template registry to a generation provider."""

    def __init__(self, provider: GenerationProvider, templates: TemplateRegistry):
        self._provider = provider
        self._templates = templates

    async def generate(self, template_name: TemplateName, prompt_data: Mapping[str, Any]) -> str:
        """
        Generate text for a template.

        Args:
            template_name: Which configured template to use
            prompt_data: Values for the template's placeholders

        Returns:
            Generated text

        Raises:
            UpstreamCallFailure: Propagated from the provider
        """
        template = self._templates.get(template_name)
        system_prompt = render_prompt(self._templates.system_prompt(template_name), prompt_data)
        user_prompt = render_prompt(self._templates.user_prompt(template_name), prompt_data)

        with tracer.start_as_current_span("llm.template") as span:
            span.set_attribute("llm.template", template_name.value)
            span.set_attribute("llm.renderer", template.renderer.value)
            logger.debug(f"Generating {template_name.value} with {template.model}")
            return await self._provider.generate(
                system_prompt,
                user_prompt,
                model=template.model,
                temperature=template.temperature,
                max_tokens=template.max_tokens,
            )
