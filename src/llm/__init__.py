"""
Generation Layer

Template registry, prompt sets and the OpenAI-compatible providers used for
text generation and image description.
"""

from src.llm.clients import create_generation_client, create_openai_client
from src.llm.generator import TextGenerator
from src.llm.prompts import PROMPT_SETS, render_prompt
from src.llm.protocols import GenerationProvider, ImageDescriber, TemplateGenerator
from src.llm.provider import ChatCompletionProvider
from src.llm.templates import (
    GenerationTemplate,
    RendererKind,
    TemplateName,
    TemplateRegistry,
    load_template_registry,
)
from src.llm.vision import VISUAL_UNAVAILABLE, VisionAnalyzer

__all__ = [
    "create_generation_client",
    "create_openai_client",
    "PROMPT_SETS",
    "VISUAL_UNAVAILABLE",
    "ChatCompletionProvider",
    "GenerationProvider",
    "GenerationTemplate",
    "ImageDescriber",
    "RendererKind",
    "TemplateGenerator",
    "TemplateName",
    "TemplateRegistry",
    "TextGenerator",
    "VisionAnalyzer",
    "load_template_registry",
    "render_prompt",
]
