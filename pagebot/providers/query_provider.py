"""简单 GET 问答接口的 provider。

接口形式为 GET <api_url>?q=<prompt>，返回 JSON，答案在 answer_field 字段中。
这类接口不区分角色，所以 messages 会被拼成一段文本。
"""

from typing import Any

import httpx
from loguru import logger

from pagebot.providers.base import LLMProvider, LLMResponse

NO_RESPONSE_TEXT = "No response from AI API."


class QueryAPIError(Exception):
    """问答接口返回了无法使用的数据。"""


def flatten_messages(messages: list[dict[str, Any]]) -> str:
    """按顺序用换行拼接各条消息内容。"""
    return "\n".join(str(m.get("content") or "") for m in messages)


class QueryAPIProvider(LLMProvider):
    """类说明：QueryAPIProvider。"""

    def __init__(
        self,
        api_url: str,
        answer_field: str = "message",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_base=api_url)
        self.answer_field = answer_field
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """异步函数说明：chat。"""
        prompt = flatten_messages(messages)
        logger.debug(f"Full prompt sent to AI API: {prompt}")

        try:
            answer = await self._request(prompt)
        except (httpx.HTTPError, QueryAPIError) as e:
            logger.error(f"Error fetching AI response: {e}")
            return LLMResponse(content=str(e), finish_reason="error")

        return LLMResponse(content=answer or NO_RESPONSE_TEXT)

    async def _request(self, prompt: str) -> str | None:
        response = await self._client.get(self.api_base, params={"q": prompt})
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise QueryAPIError(f"Invalid JSON from AI API: {response.text[:100]}") from e
        if not isinstance(data, dict):
            raise QueryAPIError(f"Unexpected AI API payload: {type(data).__name__}")
        answer = data.get(self.answer_field)
        return str(answer) if answer else None

    async def close(self) -> None:
        await self._client.aclose()
