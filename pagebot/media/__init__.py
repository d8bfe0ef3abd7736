"""视频下载与转发。"""

from pagebot.media.relay import MediaJob, MediaRelay
from pagebot.media.sources import HttpFetcher, MediaInfo, MediaLookupError, YtDlpLookup
from pagebot.media.staging import StagingStore

__all__ = [
    "MediaJob",
    "MediaRelay",
    "HttpFetcher",
    "MediaInfo",
    "MediaLookupError",
    "YtDlpLookup",
    "StagingStore",
]
