"""模块说明：base。"""

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from pagebot.bus.events import InboundEvent
from pagebot.bus.queue import MessageBus


class BaseChannel(ABC):
    """渠道基类：接收平台事件并发布到消息总线。"""

    name: str = "base"

    def __init__(self, config: Any, bus: MessageBus):
        """函数说明：__init__。"""
        self.config = config
        self.bus = bus

    @abstractmethod
    async def start(self) -> None:
        """异步函数说明：start。"""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """异步函数说明：stop。"""
        pass

    def is_allowed(self, sender_id: str) -> bool:
        """allow_from 为空时允许所有人。"""
        allow_list = getattr(self.config, "allow_from", [])

        if not allow_list:
            return True

        return str(sender_id) in allow_list

    async def _handle_event(self, event: InboundEvent) -> bool:
        """校验发送者后发布到总线，返回是否已发布。"""
        if not self.is_allowed(event.sender_id):
            logger.warning(
                f"Access denied for sender {event.sender_id} on channel {self.name}. "
                f"Add them to allowFrom list in config to grant access."
            )
            return False

        await self.bus.publish_inbound(event)
        return True
