"""Messenger Platform / Graph API 客户端。

所有请求都带 Page Access Token，并使用 "me" 代替 page_id。
失败统一抛出 MessengerAPIError，由调用方（executor、media relay）决定如何处理。
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from pagebot.utils.helpers import split_message, truncate_string


class MessengerAPIError(Exception):
    """Graph API 调用失败。message 优先取响应体中的 error.message。"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    """从 Graph API 错误响应中提取可读信息。"""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {response.status_code}: {truncate_string(response.text or '', 200)}"


class MessengerClient:
    """Send API + 主页动态发布。"""

    def __init__(
        self,
        access_token: str,
        api_url: str = "https://graph.facebook.com/v18.0",
        max_message_length: int = 2000,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.max_message_length = max_message_length
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def messages_url(self) -> str:
        return f"{self.api_url}/me/messages"

    @property
    def feed_url(self) -> str:
        return f"{self.api_url}/me/feed"

    async def send_text(self, recipient_id: str, text: str) -> None:
        """发送文本；超过单条长度上限时拆成多条依次发送。"""
        for chunk in split_message(text, self.max_message_length):
            await self._post(self.messages_url, json={
                "recipient": {"id": recipient_id},
                "message": {"text": chunk},
            })
        logger.info(f"Sent message to {recipient_id}: {truncate_string(text)}")

    async def send_typing(self, recipient_id: str, on: bool) -> None:
        await self._post(self.messages_url, json={
            "recipient": {"id": recipient_id},
            "sender_action": "typing_on" if on else "typing_off",
        })

    async def send_video_attachment(self, recipient_id: str, path: Path, title: str) -> None:
        """以 multipart 方式上传本地视频，附件标记为可复用。"""
        data = {
            "recipient": json.dumps({"id": recipient_id}),
            "message": json.dumps({
                "attachment": {
                    "type": "video",
                    "payload": {"is_reusable": True},
                }
            }),
        }
        path = Path(path)
        content = await asyncio.to_thread(path.read_bytes)
        files = {"filedata": (path.name, content, "video/mp4")}
        await self._post(self.messages_url, data=data, files=files)
        logger.info(f"Sent video attachment to {recipient_id}: {title}")

    async def post_feed(self, text: str) -> None:
        await self._post(self.feed_url, json={"message": text})
        logger.info(f"Published post on page: {text}")

    async def _post(self, url: str, **kwargs: Any) -> dict[str, Any]:
        params = {"access_token": self.access_token}
        try:
            response = await self._client.post(url, params=params, **kwargs)
        except httpx.HTTPError as e:
            raise MessengerAPIError(str(e) or type(e).__name__) from e

        if response.is_error:
            raise MessengerAPIError(_error_message(response), response.status_code)

        try:
            data = response.json()
        except ValueError:
            return {}
        # Graph API 偶尔会在 200 响应里返回 error 对象
        if isinstance(data, dict) and "error" in data:
            raise MessengerAPIError(_error_message(response), response.status_code)
        return data if isinstance(data, dict) else {}

    async def close(self) -> None:
        await self._client.aclose()
