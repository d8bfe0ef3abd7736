"""模块说明：__init__。"""

from pagebot.providers.base import LLMProvider, LLMResponse
from pagebot.providers.litellm_provider import LiteLLMProvider
from pagebot.providers.query_provider import QueryAPIProvider

__all__ = ["LLMProvider", "LLMResponse", "LiteLLMProvider", "QueryAPIProvider"]
