"""Tests for AI providers."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from pagebot.providers.litellm_provider import LiteLLMProvider
from pagebot.providers.query_provider import NO_RESPONSE_TEXT, QueryAPIProvider, flatten_messages

MESSAGES = [
    {"role": "system", "content": "You are Freddy."},
    {"role": "user", "content": "hello?"},
]


def _provider(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return QueryAPIProvider("https://ai.example/api/gpt", client=client)


def test_flatten_messages():
    assert flatten_messages(MESSAGES) == "You are Freddy.\nhello?"


@pytest.mark.asyncio
async def test_query_provider_answer():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"message": "Hi, I'm Freddy!"})

    response = await _provider(handler).chat(MESSAGES)

    assert response.content == "Hi, I'm Freddy!"
    assert not response.is_error
    assert seen[0].url.params["q"] == "You are Freddy.\nhello?"


@pytest.mark.asyncio
async def test_query_provider_empty_answer():
    response = await _provider(lambda r: httpx.Response(200, json={"status": True})).chat(MESSAGES)
    assert response.content == NO_RESPONSE_TEXT


@pytest.mark.asyncio
async def test_query_provider_http_error():
    response = await _provider(lambda r: httpx.Response(500, text="oops")).chat(MESSAGES)
    assert response.is_error


@pytest.mark.asyncio
async def test_query_provider_invalid_json():
    response = await _provider(lambda r: httpx.Response(200, text="<html>")).chat(MESSAGES)
    assert response.is_error
    assert "Invalid JSON" in response.content


@pytest.mark.asyncio
async def test_litellm_provider_parses_completion():
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = "Hello from the stage!"
    completion.choices[0].finish_reason = "stop"
    completion.usage.prompt_tokens = 10
    completion.usage.completion_tokens = 5
    completion.usage.total_tokens = 15

    with patch("pagebot.providers.litellm_provider.acompletion", AsyncMock(return_value=completion)) as mocked:
        provider = LiteLLMProvider(default_model="openai/gpt-4o-mini")
        response = await provider.chat(MESSAGES, max_tokens=64)

    assert response.content == "Hello from the stage!"
    assert response.usage["total_tokens"] == 15
    assert mocked.await_args.kwargs["model"] == "openai/gpt-4o-mini"
    assert mocked.await_args.kwargs["max_tokens"] == 64


@pytest.mark.asyncio
async def test_litellm_provider_error_response():
    with patch("pagebot.providers.litellm_provider.acompletion", AsyncMock(side_effect=RuntimeError("401"))):
        response = await LiteLLMProvider().chat(MESSAGES)

    assert response.is_error
