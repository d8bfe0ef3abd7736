"""模块说明：litellm_provider。"""

import os
from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from pagebot.providers.base import LLMProvider, LLMResponse


class LiteLLMProvider(LLMProvider):
    """通过 litellm 调用任意 chat completion 模型。"""

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = "openai/gpt-4o-mini",
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model

        self.is_openrouter = bool(
            (api_key and api_key.startswith("sk-or-")) or
            (api_base and "openrouter" in api_base)
        )

        # litellm 按模型前缀读取对应的环境变量
        if api_key:
            if self.is_openrouter:
                os.environ["OPENROUTER_API_KEY"] = api_key
            elif "anthropic" in default_model or "claude" in default_model:
                os.environ.setdefault("ANTHROPIC_API_KEY", api_key)
            elif "gemini" in default_model.lower():
                os.environ.setdefault("GEMINI_API_KEY", api_key)
            elif "deepseek" in default_model:
                os.environ.setdefault("DEEPSEEK_API_KEY", api_key)
            else:
                os.environ.setdefault("OPENAI_API_KEY", api_key)

        litellm.suppress_debug_info = True

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """异步函数说明：chat。"""
        model = model or self.default_model

        if self.is_openrouter and not model.startswith("openrouter/"):
            model = f"openrouter/{model}"

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        if self.api_base:
            kwargs["api_base"] = self.api_base

        if self.api_key:
            kwargs["api_key"] = self.api_key

        try:
            response = await acompletion(**kwargs)
            return self._parse_response(response)
        except Exception as e:
            # 网络/鉴权失败都转换为错误响应，由调用方决定如何提示用户
            logger.error(f"Error calling LLM {model}: {e}")
            return LLMResponse(
                content=f"Error calling LLM: {str(e)}",
                finish_reason="error",
            )

    def _parse_response(self, response: Any) -> LLMResponse:
        """函数说明：_parse_response。"""
        choice = response.choices[0]

        usage = {}
        if hasattr(response, "usage") and response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=choice.message.content,
            finish_reason=choice.finish_reason or "stop",
            usage=usage,
        )
