"""Plan 执行器。

按顺序逐个 await Effect，不做并发。单个 Effect 失败只记录日志并继续执行
后面的 Effect；后续 Effect 依赖前面结果时（AI 答案、发帖结果），
由本次执行的 ExecutionState 传递。
"""

from dataclasses import dataclass

from loguru import logger

from pagebot.agent.context import ContextBuilder
from pagebot.agent.effects import (
    AskAI,
    Effect,
    FetchAndRelayMedia,
    NoOp,
    Plan,
    PostToFeed,
    ReportPostOutcome,
    ResetSession,
    SendAnswer,
    SendText,
    SendTypingState,
)
from pagebot.channels.graph_api import MessengerClient
from pagebot.media.relay import MediaRelay, describe_error
from pagebot.providers.base import LLMProvider
from pagebot.session.state import Session

AI_ERROR_TEXT = "I'm sorry, I encountered an error processing your request."
POST_SUCCESS_TEXT = "Post published successfully."


@dataclass
class ExecutionState:
    """一次 Plan 执行期间在 Effect 之间传递的数据。"""
    answer: str | None = None
    post_error: str | None = None
    post_attempted: bool = False


class EffectExecutor:
    """把 Effect 映射到对应的外部调用。"""

    def __init__(
        self,
        messenger: MessengerClient,
        provider: LLMProvider,
        relay: MediaRelay,
        session: Session,
        context: ContextBuilder | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ):
        self.messenger = messenger
        self.provider = provider
        self.relay = relay
        self.session = session
        self.context = context or ContextBuilder()
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def execute(self, plan: Plan) -> ExecutionState:
        state = ExecutionState()
        for effect in plan:
            try:
                await self._apply(effect, state)
            except Exception as e:
                logger.error(f"Effect {type(effect).__name__} failed: {e}")
        return state

    async def _apply(self, effect: Effect, state: ExecutionState) -> None:
        if isinstance(effect, SendText):
            await self.messenger.send_text(effect.to, effect.text)

        elif isinstance(effect, SendTypingState):
            await self.messenger.send_typing(effect.to, effect.on)

        elif isinstance(effect, AskAI):
            state.answer = await self._ask(effect.question)

        elif isinstance(effect, SendAnswer):
            await self.messenger.send_text(effect.to, state.answer or AI_ERROR_TEXT)

        elif isinstance(effect, FetchAndRelayMedia):
            await self.relay.relay(effect.source_url, effect.to)

        elif isinstance(effect, PostToFeed):
            state.post_attempted = True
            try:
                await self.messenger.post_feed(effect.text)
            except Exception as e:
                logger.error(f"Post error details: {e}")
                state.post_error = describe_error(e)

        elif isinstance(effect, ReportPostOutcome):
            if not state.post_attempted:
                logger.warning("ReportPostOutcome without a preceding PostToFeed")
                return
            if state.post_error is None:
                await self.messenger.send_text(effect.to, POST_SUCCESS_TEXT)
            else:
                await self.messenger.send_text(effect.to, f"Failed to publish post: {state.post_error}")

        elif isinstance(effect, ResetSession):
            self.session.reset()
            logger.info("Project restarted by admin command.")

        elif isinstance(effect, NoOp):
            return

        else:
            logger.warning(f"Unknown effect: {effect!r}")

    async def _ask(self, question: str) -> str:
        """带人设调用 AI；任何失败都返回道歉文本。"""
        messages = self.context.build_messages(question)
        try:
            response = await self.provider.chat(
                messages=messages,
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(f"Error fetching AI response: {e}")
            return AI_ERROR_TEXT

        if response.is_error or not response.content:
            return AI_ERROR_TEXT
        if response.usage:
            logger.debug(f"AI usage: {response.usage}")
        return response.content
