"""入站消息总线。

渠道层把事件放进队列后立即返回，AgentLoop 在另一侧消费，
两者之间不存在任何回压。
"""

import asyncio

from loguru import logger

from pagebot.bus.events import InboundEvent


class MessageBus:
    """渠道与 AgentLoop 之间的异步队列。"""

    def __init__(self):
        self.inbound: asyncio.Queue[InboundEvent] = asyncio.Queue()

    async def publish_inbound(self, event: InboundEvent) -> None:
        await self.inbound.put(event)
        logger.debug(f"Queued inbound event from {event.sender_id}")

    async def consume_inbound(self) -> InboundEvent:
        return await self.inbound.get()

    @property
    def inbound_size(self) -> int:
        return self.inbound.qsize()
