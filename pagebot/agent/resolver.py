"""Intent -> Plan。

除 /uptime 读取当前时间外，resolve 是纯函数：它只读取 Session 快照，
对 Session 的修改通过 ResetSession 交给 executor 执行。
"""

from datetime import datetime

from pagebot.agent.effects import (
    AskAI,
    FetchAndRelayMedia,
    Plan,
    PostToFeed,
    ReportPostOutcome,
    ResetSession,
    SendAnswer,
    SendText,
    SendTypingState,
)
from pagebot.agent.intents import (
    ADMIN_INTENTS,
    AdminPost,
    AdminRestart,
    AdminUptime,
    AiQuery,
    Download,
    Help,
    Intent,
    Postback,
)
from pagebot.session.state import Session
from pagebot.utils.helpers import format_uptime

HELP_TEXT = """Available commands:
/help - Show this help message
/ytdl <YouTube URL> - Download a YouTube video
(Admin only: /restart, /uptime, /post)

/post <message> - Post a message to the Facebook page feed

For general queries, just type your message without a slash.
(Note: "/ai" and "/feddy" are not valid commands—they will be treated as normal queries.)"""

INVALID_URL_TEXT = "Invalid YouTube URL. Please provide a valid YouTube video link."
INVALID_COMMAND_TEXT = "Invalid command, use /help to see it"
RESTARTED_TEXT = "Project restarted successfully."
EMPTY_POST_TEXT = "Please provide a message to post."

GET_STARTED_PAYLOAD = "GET_STARTED_PAYLOAD"
WELCOME_TEMPLATE = "Welcome to {page_name}! We're excited to have you here. How can we assist you today?"

YOUTUBE_MARKERS = ("youtube", "youtu.be")


def is_youtube_url(url: str) -> bool:
    return any(marker in url for marker in YOUTUBE_MARKERS)


def resolve(
    intent: Intent,
    sender_id: str,
    session: Session,
    now: datetime | None = None,
    page_name: str = "[Your Page Name]",
) -> Plan:
    """按优先级把 Intent 映射为 Effect 序列。"""
    # 非管理员发出的管理命令与未知命令完全一致，不暴露命令是否存在
    if isinstance(intent, ADMIN_INTENTS) and not session.is_admin(sender_id):
        return _reject(sender_id)

    if isinstance(intent, Help):
        return (SendText(sender_id, HELP_TEXT),)

    if isinstance(intent, Download):
        if not is_youtube_url(intent.raw_url):
            return (SendText(sender_id, INVALID_URL_TEXT),)
        return (FetchAndRelayMedia(sender_id, intent.raw_url),)

    if isinstance(intent, AdminRestart):
        return (ResetSession(), SendText(sender_id, RESTARTED_TEXT))

    if isinstance(intent, AdminUptime):
        uptime = format_uptime(session.uptime_ms(now))
        return (SendText(sender_id, f"Uptime: {uptime}"),)

    if isinstance(intent, AdminPost):
        if not intent.message.strip():
            return (SendText(sender_id, EMPTY_POST_TEXT),)
        return (PostToFeed(intent.message), ReportPostOutcome(sender_id))

    if isinstance(intent, AiQuery):
        return (
            SendTypingState(sender_id, True),
            AskAI(intent.text),
            SendTypingState(sender_id, False),
            SendAnswer(sender_id),
        )

    if isinstance(intent, Postback):
        if intent.payload == GET_STARTED_PAYLOAD:
            return (SendText(sender_id, WELCOME_TEMPLATE.format(page_name=page_name)),)
        return ()

    # Unknown 以及其他无法识别的 Intent
    return _reject(sender_id)


def _reject(sender_id: str) -> Plan:
    return (SendText(sender_id, INVALID_COMMAND_TEXT),)
