"""Tests for the chat-completion provider, text generator and vision analyzer."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import openai
import pytest

from src.exceptions import UpstreamCallFailure
from src.llm.generator import TextGenerator
from src.llm.provider import ChatCompletionProvider, first_choice_text
from src.llm.templates import TemplateName, load_template_registry
from src.llm.vision import VisionAnalyzer


def _completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion("  Wubba lubba dub dub!  "))
    return client


class TestFirstChoiceText:
    def test_no_choices(self):
        with pytest.raises(UpstreamCallFailure, match="no choices"):
            first_choice_text(SimpleNamespace(choices=[]), "generation")

    def test_blank_content(self):
        with pytest.raises(UpstreamCallFailure, match="no text"):
            first_choice_text(_completion("   "), "generation")


class TestChatCompletionProvider:
    @pytest.mark.asyncio
    async def test_generate_sends_system_and_user(self, openai_client):
        provider = ChatCompletionProvider(openai_client)

        text = await provider.generate("sys", "usr", model="llama-3.3-70b-versatile", temperature=0.8, max_tokens=50)

        assert text == "Wubba lubba dub dub!"
        kwargs = openai_client.chat.completions.create.await_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "usr"},
        ]
        assert kwargs["max_tokens"] == 50

    @pytest.mark.asyncio
    async def test_max_tokens_omitted_when_none(self, openai_client):
        await ChatCompletionProvider(openai_client).generate("s", "u", model="m", temperature=0.1)
        assert "max_tokens" not in openai_client.chat.completions.create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_sdk_error_is_upstream_failure(self, openai_client):
        openai_client.chat.completions.create.side_effect = openai.OpenAIError("rate limited")

        with pytest.raises(UpstreamCallFailure) as exc_info:
            await ChatCompletionProvider(openai_client).generate("s", "u", model="m", temperature=0.1)
        assert exc_info.value.service == "generation"


class TestTextGenerator:
    @pytest.mark.asyncio
    async def test_uses_template_settings(self):
        provider = MagicMock()
        provider.generate = AsyncMock(return_value="a green creature from outer space")
        registry = load_template_registry()
        generator = TextGenerator(provider, registry)

        result = await generator.generate(TemplateName.QUERY_EXPANSION, {"query": "alien"})

        assert result == "a green creature from outer space"
        system_prompt, user_prompt = provider.generate.await_args.args
        assert "alien" in user_prompt
        template = registry.get(TemplateName.QUERY_EXPANSION)
        assert provider.generate.await_args.kwargs == {
            "model": template.model,
            "temperature": template.temperature,
            "max_tokens": template.max_tokens,
        }


class TestVisionAnalyzer:
    @pytest.mark.asyncio
    async def test_describe_sends_image(self, openai_client):
        analyzer = VisionAnalyzer(openai_client, model="vision-model", max_tokens=120)

        text = await analyzer.describe("https://example.com/rick.png", "Rick Sanchez")

        assert text == "Wubba lubba dub dub!"
        kwargs = openai_client.chat.completions.create.await_args.kwargs
        content = kwargs["messages"][0]["content"]
        assert "Rick Sanchez" in content[0]["text"]
        assert content[1] == {"type": "image_url", "image_url": {"url": "https://example.com/rick.png"}}
        assert kwargs["max_tokens"] == 120

    @pytest.mark.asyncio
    async def test_failure_is_upstream_failure(self, openai_client):
        openai_client.chat.completions.create.side_effect = openai.OpenAIError("bad image")

        with pytest.raises(UpstreamCallFailure) as exc_info:
            await VisionAnalyzer(openai_client, model="m").describe("u", "Rick")
        assert exc_info.value.service == "vision"
