"""Tests for video lookup and byte fetching."""

from unittest.mock import MagicMock, patch

import httpx
import pytest
import yt_dlp

from pagebot.media.sources import HttpFetcher, MediaInfo, MediaLookupError, YtDlpLookup


def test_media_info_from_single_video():
    info = {"title": "Song", "url": "https://cdn/v.mp4"}
    assert YtDlpLookup._to_media_info(info) == MediaInfo("Song", "https://cdn/v.mp4")


def test_media_info_from_playlist_entry():
    info = {"entries": [None, {"title": "First", "url": "https://cdn/1.mp4"}]}
    assert YtDlpLookup._to_media_info(info).title == "First"


def test_media_info_requested_formats_fallback():
    info = {"title": "Split", "requested_formats": [{"url": "https://cdn/video"}, {"url": "https://cdn/audio"}]}
    assert YtDlpLookup._to_media_info(info).direct_url == "https://cdn/video"


@pytest.mark.parametrize("info", [None, {}, {"title": "No url"}])
def test_media_info_without_url(info):
    with pytest.raises(MediaLookupError):
        YtDlpLookup._to_media_info(info)


@pytest.mark.asyncio
async def test_lookup_wraps_download_error():
    ydl = MagicMock()
    ydl.__enter__.return_value = ydl
    ydl.extract_info.side_effect = yt_dlp.utils.DownloadError("ERROR: Video unavailable")

    with patch("pagebot.media.sources.yt_dlp.YoutubeDL", return_value=ydl):
        with pytest.raises(MediaLookupError, match="Video unavailable"):
            await YtDlpLookup().lookup("https://youtu.be/gone")


@pytest.mark.asyncio
async def test_lookup_does_not_download():
    ydl = MagicMock()
    ydl.__enter__.return_value = ydl
    ydl.extract_info.return_value = {"title": "Song", "url": "https://cdn/v.mp4"}

    with patch("pagebot.media.sources.yt_dlp.YoutubeDL", return_value=ydl):
        media = await YtDlpLookup().lookup("https://youtu.be/abc")

    assert media.title == "Song"
    ydl.extract_info.assert_called_once_with("https://youtu.be/abc", download=False)


@pytest.mark.asyncio
async def test_fetch_bytes():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"data")))
    assert await HttpFetcher(client=client).fetch_bytes("https://cdn/v.mp4") == b"data"


@pytest.mark.asyncio
async def test_fetch_bytes_raises_on_http_error():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    with pytest.raises(httpx.HTTPStatusError):
        await HttpFetcher(client=client).fetch_bytes("https://cdn/missing.mp4")
