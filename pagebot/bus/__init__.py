"""消息总线导出入口。"""

from pagebot.bus.events import InboundEvent
from pagebot.bus.queue import MessageBus

__all__ = ["MessageBus", "InboundEvent"]
