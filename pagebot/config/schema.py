"""模块说明：schema。"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MessengerConfig(BaseModel):
    """Facebook Page / Messenger 平台配置。"""
    page_access_token: str = ""  # Page Access Token，Graph API 调用时使用 "me" 代替 page_id
    verify_token: str = ""  # webhook 订阅校验用的 token
    admin_id: str = ""  # 管理员 PSID，只有该用户能使用 /restart、/uptime、/post
    graph_api_version: str = "v18.0"
    graph_api_base: str = "https://graph.facebook.com"
    page_name: str = "[Your Page Name]"
    allow_from: list[str] = Field(default_factory=list)  # 为空表示允许所有人
    max_message_length: int = 2000  # Messenger 单条文本上限
    timeout: float = 30.0


class AIConfig(BaseModel):
    """类说明：AIConfig。"""
    provider: Literal["query", "litellm"] = "query"
    api_url: str = "https://ajiro.gleeze.com/api/gpt"  # query 模式：GET <api_url>?q=<prompt>
    answer_field: str = "message"
    model: str = "openai/gpt-4o-mini"  # litellm 模式使用
    api_key: str = ""
    api_base: str | None = None
    max_tokens: int = 1024
    temperature: float = 0.7
    timeout: float = 60.0


class MediaConfig(BaseModel):
    """类说明：MediaConfig。"""
    staging_dir: str = "./cache"
    timeout: float = 300.0


class AgentConfig(BaseModel):
    """类说明：AgentConfig。"""
    persona: str | None = None  # 覆盖默认人设提示词
    startup_message: str = "Bot online!\nFbPageBot"


class GatewayConfig(BaseModel):
    """类说明：GatewayConfig。"""
    host: str = "0.0.0.0"
    port: int = 3000


class Config(BaseSettings):
    """根配置，可通过 PAGEBOT_ 前缀的环境变量覆盖（嵌套用 __ 分隔）。"""

    model_config = SettingsConfigDict(env_prefix="PAGEBOT_", env_nested_delimiter="__")

    messenger: MessengerConfig = Field(default_factory=MessengerConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)

    @property
    def staging_path(self) -> Path:
        """函数说明：staging_path。"""
        return Path(self.media.staging_dir).expanduser()

    @property
    def graph_api_url(self) -> str:
        """函数说明：graph_api_url。"""
        base = self.messenger.graph_api_base.rstrip("/")
        return f"{base}/{self.messenger.graph_api_version}"
