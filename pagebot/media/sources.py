"""视频来源：页面 URL -> 直链解析，以及直链字节下载。"""

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
import yt_dlp
from loguru import logger

# 只要同时带音视频的单文件 mp4，Messenger 才能直接播放
DEFAULT_FORMAT = "best[ext=mp4][vcodec!=none][acodec!=none]/best[vcodec!=none][acodec!=none]"


class MediaLookupError(Exception):
    """无法从页面 URL 解析出可下载的视频。"""


@dataclass(frozen=True)
class MediaInfo:
    title: str
    direct_url: str


class YtDlpLookup:
    """用 yt-dlp 只解析元数据，不下载。"""

    def __init__(self, format_selector: str = DEFAULT_FORMAT):
        self.format_selector = format_selector

    async def lookup(self, page_url: str) -> MediaInfo:
        # yt-dlp 是同步库，放到线程里执行
        return await asyncio.to_thread(self._extract, page_url)

    def _extract(self, page_url: str) -> MediaInfo:
        options = {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "skip_download": True,
            "format": self.format_selector,
        }
        try:
            with yt_dlp.YoutubeDL(options) as ydl:
                info = ydl.extract_info(page_url, download=False)
        except yt_dlp.utils.DownloadError as e:
            raise MediaLookupError(str(e)) from e

        return self._to_media_info(info)

    @staticmethod
    def _to_media_info(info: dict[str, Any] | None) -> MediaInfo:
        if not info:
            raise MediaLookupError("No video information found.")
        if info.get("entries"):
            info = next((e for e in info["entries"] if e), None) or {}

        direct_url = info.get("url")
        if not direct_url:
            # 没有选中单一格式时退回到 requested_formats 的第一个
            requested = info.get("requested_formats") or []
            direct_url = requested[0].get("url") if requested else None
        if not direct_url:
            raise MediaLookupError("No downloadable format found.")

        title = info.get("title") or "Untitled"
        logger.debug(f"Resolved video '{title}'")
        return MediaInfo(title=title, direct_url=direct_url)


class HttpFetcher:
    """类说明：HttpFetcher。"""

    def __init__(self, timeout: float = 300.0, client: httpx.AsyncClient | None = None):
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch_bytes(self, url: str) -> bytes:
        response = await self._client.get(url)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        await self._client.aclose()
