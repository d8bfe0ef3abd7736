"""组装并运行各组件：总线、会话、Graph API 客户端、AI provider、
视频转发、执行器、主循环和 webhook 渠道。"""

import asyncio

from loguru import logger

from pagebot.agent.context import ContextBuilder
from pagebot.agent.executor import EffectExecutor
from pagebot.agent.loop import AgentLoop
from pagebot.bus.queue import MessageBus
from pagebot.channels.graph_api import MessengerClient
from pagebot.channels.messenger import MessengerChannel
from pagebot.config.schema import Config
from pagebot.media.relay import MediaRelay
from pagebot.media.sources import HttpFetcher, YtDlpLookup
from pagebot.media.staging import StagingStore
from pagebot.providers.base import LLMProvider
from pagebot.providers.litellm_provider import LiteLLMProvider
from pagebot.providers.query_provider import QueryAPIProvider
from pagebot.session.state import Session


def build_provider(config: Config) -> LLMProvider:
    """按 ai.provider 选择 AI 实现。"""
    ai = config.ai
    if ai.provider == "litellm":
        return LiteLLMProvider(
            api_key=ai.api_key or None,
            api_base=ai.api_base,
            default_model=ai.model,
        )
    return QueryAPIProvider(
        api_url=ai.api_url,
        answer_field=ai.answer_field,
        timeout=ai.timeout,
    )


class Gateway:
    """类说明：Gateway。"""

    def __init__(self, config: Config, provider: LLMProvider | None = None):
        self.config = config
        self.bus = MessageBus()
        self.session = Session(admin_id=config.messenger.admin_id)

        self.messenger = MessengerClient(
            access_token=config.messenger.page_access_token,
            api_url=config.graph_api_url,
            max_message_length=config.messenger.max_message_length,
            timeout=config.messenger.timeout,
        )
        self.provider = provider or build_provider(config)
        self.fetcher = HttpFetcher(timeout=config.media.timeout)
        self.relay = MediaRelay(
            messenger=self.messenger,
            lookup=YtDlpLookup(),
            fetcher=self.fetcher,
            staging=StagingStore(config.staging_path),
        )
        self.executor = EffectExecutor(
            messenger=self.messenger,
            provider=self.provider,
            relay=self.relay,
            session=self.session,
            context=ContextBuilder(config.agent.persona),
            model=config.ai.model if config.ai.provider == "litellm" else None,
            max_tokens=config.ai.max_tokens,
            temperature=config.ai.temperature,
        )
        self.agent = AgentLoop(
            bus=self.bus,
            executor=self.executor,
            session=self.session,
            page_name=config.messenger.page_name,
        )
        self.channel = MessengerChannel(
            config.messenger,
            self.bus,
            host=config.gateway.host,
            port=config.gateway.port,
        )

    async def announce_startup(self) -> bool:
        """通知管理员服务已上线；失败只记录日志。"""
        admin_id = self.config.messenger.admin_id
        if not admin_id:
            logger.warning("No admin configured; skipping startup message")
            return False
        try:
            await self.messenger.send_text(admin_id, self.config.agent.startup_message)
        except Exception as e:
            logger.error(f"Failed to send startup message: {e}")
            return False
        return True

    async def run(self) -> None:
        """运行直到 webhook 服务退出（例如收到 Ctrl+C）。"""
        agent_task = asyncio.create_task(self.agent.run())
        try:
            await asyncio.gather(self.channel.start(), self.announce_startup())
        finally:
            await self.shutdown(agent_task)

    async def shutdown(self, agent_task: asyncio.Task | None = None) -> None:
        self.agent.stop()
        await self.channel.stop()
        if agent_task is not None:
            await agent_task
        await self.agent.drain()

        await self.messenger.close()
        await self.fetcher.close()
        await self.provider.close()
        logger.info("Gateway stopped")
