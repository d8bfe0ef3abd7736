"""进程级会话状态。

Session 只保存启动时间和管理员身份，由调用方显式传入 resolver
和 executor；唯一的写操作是 reset()。
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Session:
    """运行时状态：启动时间 + 管理员 PSID。"""

    admin_id: str
    started_at: datetime = field(default_factory=datetime.now)

    def is_admin(self, sender_id: str) -> bool:
        return bool(self.admin_id) and sender_id == self.admin_id

    def reset(self, now: datetime | None = None) -> None:
        """重置启动时间（/restart 命令）。"""
        self.started_at = now or datetime.now()

    def uptime_ms(self, now: datetime | None = None) -> int:
        elapsed = (now or datetime.now()) - self.started_at
        return max(0, int(elapsed.total_seconds() * 1000))
