"""命令分类器。

把一条原始文本解析成带标签的 Intent。这里只做确定性的前缀/token
匹配，不涉及身份判断：管理员权限由 resolver 负责。
"""

from dataclasses import dataclass

from pagebot.bus.events import InboundEvent


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Download:
    raw_url: str


@dataclass(frozen=True)
class AdminRestart:
    pass


@dataclass(frozen=True)
class AdminUptime:
    pass


@dataclass(frozen=True)
class AdminPost:
    message: str


@dataclass(frozen=True)
class AiQuery:
    text: str


@dataclass(frozen=True)
class Unknown:
    command: str = ""


@dataclass(frozen=True)
class Postback:
    payload: str


Intent = Help | Download | AdminRestart | AdminUptime | AdminPost | AiQuery | Unknown | Postback

ADMIN_INTENTS = (AdminRestart, AdminUptime, AdminPost)

# 这两个 token 不是命令：去掉开头的 "/" 后整句当作普通提问
PASS_THROUGH_COMMANDS = frozenset({"/ai", "/feddy"})


def split_command(text: str) -> tuple[str, str]:
    """按第一段空白切出命令（小写）和参数（去首尾空白，缺省为空串）。"""
    parts = text.split(maxsplit=1)
    if not parts:
        return "", ""
    cmd = parts[0].lower()
    rest = parts[1].strip() if len(parts) > 1 else ""
    return cmd, rest


def classify(text: str) -> Intent:
    """文本 -> Intent，纯函数且对任何输入都有结果。"""
    if not text.startswith("/"):
        return AiQuery(text=text)

    cmd, rest = split_command(text)

    if cmd == "/help":
        return Help()
    if cmd == "/ytdl":
        return Download(raw_url=rest)
    if cmd == "/restart":
        return AdminRestart()
    if cmd == "/uptime":
        return AdminUptime()
    if cmd == "/post":
        return AdminPost(message=rest)
    if cmd in PASS_THROUGH_COMMANDS:
        return AiQuery(text=text[1:])
    return Unknown(command=cmd)


def classify_event(event: InboundEvent) -> Intent:
    """有文本时按文本分类，否则视为 postback。"""
    if event.has_text:
        return classify(event.text)
    return Postback(payload=event.postback_payload or "")
