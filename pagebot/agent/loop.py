"""Agent 主循环模块。

从消息总线消费入站事件，每个事件启动一个独立的 asyncio 任务：
分类 -> 解析为 Plan -> 执行。任务之间没有顺序保证，也没有回压；
单个事件失败不会影响其他事件或主循环。
"""

import asyncio
from datetime import datetime

from loguru import logger

from pagebot.agent.effects import Plan
from pagebot.agent.executor import EffectExecutor
from pagebot.agent.intents import classify_event
from pagebot.agent.resolver import resolve
from pagebot.bus.events import InboundEvent
from pagebot.bus.queue import MessageBus
from pagebot.session.state import Session


class AgentLoop:
    """事件分发引擎。

    职责分工：
    1. 消费入站事件（inbound）。
    2. 为每个事件创建独立任务，不等待其完成。
    3. 在任务内完成 classify -> resolve -> execute。
    """

    def __init__(
        self,
        bus: MessageBus,
        executor: EffectExecutor,
        session: Session,
        page_name: str = "[Your Page Name]",
    ):
        self.bus = bus
        self.executor = executor
        self.session = session
        self.page_name = page_name

        self._running = False
        self._tasks: set[asyncio.Task] = set()

    async def run(self) -> None:
        """启动主循环并持续分发入站事件。"""
        self._running = True
        logger.info("Agent loop started")

        while self._running:
            try:
                # 设定短超时，避免无限阻塞，便于及时响应 stop()。
                event = await asyncio.wait_for(
                    self.bus.consume_inbound(),
                    timeout=1.0
                )
            except asyncio.TimeoutError:
                continue

            self.dispatch(event)

    def stop(self) -> None:
        """请求停止主循环。"""
        self._running = False
        logger.info("Agent loop stopping")

    def dispatch(self, event: InboundEvent) -> asyncio.Task:
        """为事件创建任务并立即返回。"""
        task = asyncio.create_task(self._safe_process(event))
        # 持有引用，防止任务在完成前被回收
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """等待所有进行中的事件任务结束（用于关闭流程）。"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def _safe_process(self, event: InboundEvent) -> None:
        try:
            await self.process_event(event)
        except Exception:
            logger.exception(f"Error processing event from {event.sender_id}")

    async def process_event(self, event: InboundEvent, now: datetime | None = None) -> Plan:
        """处理单个事件，返回已执行的 Plan。"""
        self._log_inbound(event)

        intent = classify_event(event)
        plan = resolve(intent, event.sender_id, self.session, now=now, page_name=self.page_name)
        logger.debug(f"Plan for {event.sender_id}: {[type(e).__name__ for e in plan]}")

        await self.executor.execute(plan)
        return plan

    def _log_inbound(self, event: InboundEvent) -> None:
        if not event.has_text:
            logger.info(f"Postback from {event.sender_id}: {event.postback_payload}")
        elif self.session.is_admin(event.sender_id):
            logger.info(f"Admin: {event.text}")
        else:
            logger.info(f"User id: {event.sender_id}, User question: {event.text}")
