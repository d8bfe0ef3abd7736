"""模块说明：helpers。"""

from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """函数说明：ensure_dir。"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """函数说明：truncate_string。"""
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix


def format_uptime(elapsed_ms: int) -> str:
    """把毫秒数格式化为 "H hours, M minutes, and S seconds."（小时不折算成天）。"""
    total_seconds = max(0, elapsed_ms) // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds // 60) % 60
    seconds = total_seconds % 60
    return f"{hours} hours, {minutes} minutes, and {seconds} seconds."


def split_message(text: str, max_length: int = 2000) -> list[str]:
    """按平台长度上限切分长消息。

    优先在换行处切分，其次是空格，最后硬切。
    """
    if len(text) <= max_length:
        return [text]

    chunks = []
    remaining = text

    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break

        split_at = remaining.rfind("\n", 0, max_length)
        if split_at <= 0:
            split_at = remaining.rfind(" ", 0, max_length)
        if split_at <= 0:
            split_at = max_length

        chunks.append(remaining[:split_at])
        remaining = remaining[split_at:].lstrip()

    return chunks
