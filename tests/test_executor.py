"""Tests for sequential Plan execution and failure containment."""

from datetime import datetime
from unittest.mock import AsyncMock, call

import pytest
from loguru import logger

from conftest import ADMIN_ID, USER_ID
from pagebot.agent.context import DEFAULT_PERSONA, ContextBuilder
from pagebot.agent.effects import (
    AskAI,
    FetchAndRelayMedia,
    NoOp,
    PostToFeed,
    ReportPostOutcome,
    ResetSession,
    SendAnswer,
    SendText,
    SendTypingState,
)
from pagebot.agent.executor import AI_ERROR_TEXT, POST_SUCCESS_TEXT, EffectExecutor
from pagebot.agent.intents import AdminPost
from pagebot.agent.resolver import resolve
from pagebot.channels.graph_api import MessengerAPIError
from pagebot.providers.base import LLMResponse

AI_PLAN = (
    SendTypingState(USER_ID, True),
    AskAI("who are you?"),
    SendTypingState(USER_ID, False),
    SendAnswer(USER_ID),
)


def _executor(messenger, session, provider=None, relay=None):
    provider = provider or AsyncMock()
    relay = relay or AsyncMock()
    return EffectExecutor(messenger=messenger, provider=provider, relay=relay, session=session)


@pytest.mark.asyncio
async def test_ai_plan_runs_in_order(messenger, session):
    """Typing on, AI call, typing off, answer."""
    seen_before_ai = []

    async def chat(**kwargs):
        seen_before_ai.extend(messenger.mock_calls)
        return LLMResponse(content="I'm Freddy!")

    provider = AsyncMock()
    provider.chat.side_effect = chat

    await _executor(messenger, session, provider=provider).execute(AI_PLAN)

    assert seen_before_ai == [call.send_typing(USER_ID, True)]
    assert messenger.mock_calls == [
        call.send_typing(USER_ID, True),
        call.send_typing(USER_ID, False),
        call.send_text(USER_ID, "I'm Freddy!"),
    ]


@pytest.mark.asyncio
async def test_ai_question_is_wrapped_with_persona(messenger, session):
    provider = AsyncMock()
    provider.chat.return_value = LLMResponse(content="ok")

    await _executor(messenger, session, provider=provider).execute(AI_PLAN)

    messages = provider.chat.await_args.kwargs["messages"]
    assert messages[0] == {"role": "system", "content": DEFAULT_PERSONA}
    assert messages[1] == {"role": "user", "content": "who are you?"}


@pytest.mark.asyncio
async def test_ai_failure_sends_apology(messenger, session):
    provider = AsyncMock()
    provider.chat.side_effect = RuntimeError("network down")

    await _executor(messenger, session, provider=provider).execute(AI_PLAN)

    messenger.send_text.assert_awaited_once_with(USER_ID, AI_ERROR_TEXT)
    assert messenger.send_typing.await_count == 2


@pytest.mark.asyncio
async def test_ai_error_response_sends_apology(messenger, session):
    provider = AsyncMock()
    provider.chat.return_value = LLMResponse(content="Error calling LLM: 401", finish_reason="error")

    await _executor(messenger, session, provider=provider).execute(AI_PLAN)

    messenger.send_text.assert_awaited_once_with(USER_ID, AI_ERROR_TEXT)


@pytest.mark.asyncio
async def test_failed_effect_does_not_abort_plan(messenger, session):
    """A typing indicator failure is logged and the answer is still sent."""
    messenger.send_typing.side_effect = MessengerAPIError("(#100) No matching user found")
    provider = AsyncMock()
    provider.chat.return_value = LLMResponse(content="still here")

    await _executor(messenger, session, provider=provider).execute(AI_PLAN)

    messenger.send_text.assert_awaited_once_with(USER_ID, "still here")


@pytest.mark.asyncio
async def test_post_success_scenario(messenger, session):
    plan = resolve(AdminPost(message="Hello world"), ADMIN_ID, session)

    await _executor(messenger, session).execute(plan)

    assert messenger.mock_calls == [
        call.post_feed("Hello world"),
        call.send_text(ADMIN_ID, POST_SUCCESS_TEXT),
    ]


@pytest.mark.asyncio
async def test_post_failure_reports_reason(messenger, session):
    messenger.post_feed.side_effect = MessengerAPIError("Invalid OAuth access token.", 400)

    state = await _executor(messenger, session).execute(
        (PostToFeed("Hello world"), ReportPostOutcome(ADMIN_ID))
    )

    assert state.post_error == "Invalid OAuth access token."
    messenger.send_text.assert_awaited_once_with(
        ADMIN_ID, "Failed to publish post: Invalid OAuth access token."
    )


@pytest.mark.asyncio
async def test_reset_session(messenger, session):
    before = session.started_at

    await _executor(messenger, session).execute((ResetSession(), SendText(ADMIN_ID, "done")))

    assert session.started_at > before
    assert session.started_at <= datetime.now()
    messenger.send_text.assert_awaited_once_with(ADMIN_ID, "done")


@pytest.mark.asyncio
async def test_media_effect_delegates_to_relay(messenger, session):
    relay = AsyncMock()

    await _executor(messenger, session, relay=relay).execute(
        (FetchAndRelayMedia(USER_ID, "https://youtu.be/abc"),)
    )

    relay.relay.assert_awaited_once_with("https://youtu.be/abc", USER_ID)
    assert messenger.mock_calls == []


@pytest.mark.asyncio
async def test_noop_and_empty_plan(messenger, session):
    executor = _executor(messenger, session)
    await executor.execute(())
    await executor.execute((NoOp(),))
    assert messenger.mock_calls == []


def test_context_builder_persona_override():
    builder = ContextBuilder("  You are a pirate.  ")
    assert builder.build_messages("hi")[0]["content"] == "You are a pirate."


@pytest.mark.asyncio
async def test_ai_usage_is_logged(messenger, session):
    records = []
    sink_id = logger.add(lambda message: records.append(message.record["message"]), level="DEBUG")
    provider = AsyncMock()
    provider.chat.return_value = LLMResponse(content="ok", usage={"total_tokens": 15})
    try:
        await _executor(messenger, session, provider=provider).execute(AI_PLAN)
    finally:
        logger.remove(sink_id)

    messenger.send_text.assert_awaited_once_with(USER_ID, "ok")
    assert "AI usage: {'total_tokens': 15}" in records
