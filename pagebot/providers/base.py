"""模块说明：base。"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMResponse:
    """类说明：LLMResponse。"""
    content: str | None
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        """函数说明：is_error。"""
        return self.finish_reason == "error"


class LLMProvider(ABC):
    """AI 回答接口：输入 messages，返回 LLMResponse。

    实现类不向外抛出网络异常，失败时返回 finish_reason="error" 的响应。
    """

    def __init__(self, api_key: str | None = None, api_base: str | None = None):
        self.api_key = api_key
        self.api_base = api_base

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """异步函数说明：chat。"""
        pass

    async def close(self) -> None:
        """释放底层连接（默认无需处理）。"""
        return None
