"""入站事件模型。

每次 webhook 投递中的一条 messaging 记录对应一个 InboundEvent，
只在一次分发周期内有效，创建后不可修改。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class InboundEvent:
    """Messenger 平台的一条入站消息或 postback。"""

    sender_id: str  # PSID（页面范围内的用户标识）
    text: str | None = None
    postback_payload: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)  # mid、页面 id 等渠道数据

    @property
    def has_text(self) -> bool:
        return bool(self.text)
