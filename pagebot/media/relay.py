"""/ytdl 视频转发流程。

解析直链 -> 发送标题 -> 下载到暂存文件 -> 上传附件 -> 删除暂存文件。
无论哪一步失败，暂存文件都会且只会被尝试删除一次。
"""

import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from pagebot.channels.graph_api import MessengerClient
from pagebot.media.sources import HttpFetcher, YtDlpLookup
from pagebot.media.staging import StagingStore

DONE_DOWNLOADING_TEXT = "Done downloading. Sending video..."


def describe_error(e: BaseException) -> str:
    return str(e) or "Unknown error."


@dataclass
class MediaJob:
    """单次下载任务，任务结束时 staging_path 被释放。"""
    source_url: str
    recipient: str
    job_id: str
    staging_path: Path
    title: str | None = None


class MediaRelay:
    """类说明：MediaRelay。"""

    def __init__(
        self,
        messenger: MessengerClient,
        lookup: YtDlpLookup,
        fetcher: HttpFetcher,
        staging: StagingStore,
    ):
        self.messenger = messenger
        self.lookup = lookup
        self.fetcher = fetcher
        self.staging = staging

    def new_job(self, source_url: str, recipient: str) -> MediaJob:
        job_id = uuid.uuid4().hex
        return MediaJob(
            source_url=source_url,
            recipient=recipient,
            staging_path=self.staging.path_for(job_id),
            job_id=job_id,
        )

    async def relay(self, source_url: str, recipient: str) -> bool:
        """执行完整转发流程，上传成功时返回 True。"""
        job = self.new_job(source_url, recipient)
        try:
            return await self._run(job)
        finally:
            await self._cleanup(job)

    async def _run(self, job: MediaJob) -> bool:
        try:
            media = await self.lookup.lookup(job.source_url)
        except Exception as e:
            logger.error(f"Video lookup failed for {job.source_url}: {e}")
            await self._say(job.recipient, f"Failed to download video: {describe_error(e)}")
            return False

        job.title = media.title
        # 标题在下载前发出；后续下载失败时用户仍会先看到标题
        await self._say(job.recipient, f"▶️Title: {media.title}")

        try:
            if not self.staging.exists(self.staging.root):
                self.staging.make_dir()
            data = await self.fetcher.fetch_bytes(media.direct_url)
            # 写盘放到线程中，不阻塞其他事件
            await asyncio.to_thread(self.staging.write, job.staging_path, data)
        except Exception as e:
            logger.error(f"Video download failed for {job.source_url}: {e}")
            await self._say(job.recipient, f"Failed to download video: {describe_error(e)}")
            return False

        await self._say(job.recipient, DONE_DOWNLOADING_TEXT)

        try:
            await self.messenger.send_video_attachment(job.recipient, job.staging_path, media.title)
        except Exception as e:
            logger.error(f"Error sending video attachment: {e}")
            await self._say(job.recipient, f"Failed to send video: {describe_error(e)}")
            return False

        return True

    async def _cleanup(self, job: MediaJob) -> None:
        existed = self.staging.exists(job.staging_path)
        error = self.staging.delete(job.staging_path)
        if error is not None:
            logger.error(f"Error deleting file: {describe_error(error)}")
            await self._say(job.recipient, f"Error deleting video file: {describe_error(error)}")
        elif existed:
            logger.info(f"Deleted file: {job.staging_path}")

    async def _say(self, recipient: str, text: str) -> None:
        # 进度提示发送失败只记录日志，不影响任务本身
        try:
            await self.messenger.send_text(recipient, text)
        except Exception as e:
            logger.error(f"Error sending message to {recipient}: {e}")
