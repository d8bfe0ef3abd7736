"""Messenger webhook 渠道。

GET /webhook 用于订阅校验，POST /webhook 接收事件。
事件放入总线后立即返回 200，不等待处理完成。
"""

from datetime import datetime
from typing import Any

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from loguru import logger

from pagebot.bus.events import InboundEvent
from pagebot.bus.queue import MessageBus
from pagebot.channels.base import BaseChannel
from pagebot.config.schema import MessengerConfig


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    return datetime.now()


def parse_messaging_item(item: dict[str, Any], page_id: str | None = None) -> InboundEvent | None:
    """把一条 messaging 记录转换为 InboundEvent；无需处理的记录返回 None。"""
    sender_id = (item.get("sender") or {}).get("id")
    if not sender_id:
        return None

    message = item.get("message") or {}
    # 主页自己发出的消息回显
    if message.get("is_echo"):
        return None

    text = (message.get("text") or "").strip() or None
    payload = (item.get("postback") or {}).get("payload")
    if text is None and payload is None:
        return None

    return InboundEvent(
        sender_id=str(sender_id),
        text=text,
        postback_payload=payload,
        timestamp=_parse_timestamp(item.get("timestamp")),
        metadata={
            "page_id": page_id,
            "mid": message.get("mid"),
        },
    )


def parse_webhook_body(body: dict[str, Any]) -> list[InboundEvent]:
    """解析一次 webhook 投递中所有 entry 的所有 messaging 记录。"""
    events = []
    for entry in body.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        for item in entry.get("messaging") or []:
            if not isinstance(item, dict):
                continue
            event = parse_messaging_item(item, page_id=entry.get("id"))
            if event is not None:
                events.append(event)
    return events


class MessengerChannel(BaseChannel):
    """Facebook Page webhook（FastAPI + uvicorn）。"""

    name = "messenger"

    def __init__(
        self,
        config: MessengerConfig,
        bus: MessageBus,
        host: str = "0.0.0.0",
        port: int = 3000,
    ):
        super().__init__(config, bus)
        self.config: MessengerConfig = config
        self.host = host
        self.port = port
        self.app = self._build_app()
        self._server: uvicorn.Server | None = None

    def _build_app(self) -> FastAPI:
        app = FastAPI(title="pagebot", docs_url=None, redoc_url=None)

        @app.get("/")
        async def healthcheck() -> PlainTextResponse:
            return PlainTextResponse("pagebot running")

        @app.get("/webhook")
        async def verify(request: Request) -> Response:
            params = request.query_params
            mode = params.get("hub.mode")
            token = params.get("hub.verify_token")
            challenge = params.get("hub.challenge", "")
            if mode == "subscribe" and self.config.verify_token and token == self.config.verify_token:
                logger.info("Webhook verified")
                return PlainTextResponse(challenge)
            logger.warning("Webhook verification failed")
            return Response(status_code=403)

        @app.post("/webhook")
        async def receive(request: Request) -> Response:
            try:
                body = await request.json()
            except ValueError:
                logger.warning("Invalid JSON body on webhook")
                return Response(status_code=400)

            if not isinstance(body, dict) or body.get("object") != "page":
                return Response(status_code=404)

            for event in parse_webhook_body(body):
                await self._handle_event(event)
            return PlainTextResponse("EVENT_RECEIVED")

        return app

    async def start(self) -> None:
        """启动 webhook 服务，直到 stop() 被调用。"""
        if not self.config.page_access_token:
            logger.warning("Messenger page access token not configured; replies will fail")

        config = uvicorn.Config(self.app, host=self.host, port=self.port, log_level="info")
        self._server = uvicorn.Server(config)

        logger.info(f"Server running on port {self.port}")
        await self._server.serve()

    async def stop(self) -> None:
        if self._server:
            self._server.should_exit = True
