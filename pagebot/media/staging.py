"""视频暂存目录。

每个下载任务使用独立的文件名，避免并发任务互相覆盖。
"""

from pathlib import Path

from pagebot.utils.helpers import ensure_dir


class StagingStore:
    """类说明：StagingStore。"""

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, job_id: str) -> Path:
        return self.root / f"ytdl-{job_id}.mp4"

    def exists(self, path: Path) -> bool:
        return path.exists()

    def make_dir(self) -> Path:
        return ensure_dir(self.root)

    def write(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def delete(self, path: Path) -> OSError | None:
        """删除暂存文件；失败时返回异常而不是抛出。文件不存在视为成功。"""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            return e
        return None
