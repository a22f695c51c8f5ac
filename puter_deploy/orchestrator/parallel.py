"""Bounded parallel upload utilities."""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

from ..models import FileEntry, UploadTask
from ..protocols import IRemoteFileSystem
from ..utils.events import UploadProgress
from ..utils.paths import join_remote_path

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROGRESS_EVERY = 25

ProgressCallback = Callable[[UploadProgress], Any]


class _Cursor:
    """Index cursor shared by all workers of one run."""

    def __init__(self, total: int):
        self._next = 0
        self._total = total

    def claim(self) -> Optional[int]:
        # No await between read and increment: atomic on the event loop.
        index = self._next
        if index >= self._total:
            return None
        self._next += 1
        return index

    def exhaust(self) -> None:
        self._next = self._total


async def run_bounded(
    items: Sequence[T],
    limit: int,
    worker: Callable[[T, int], Awaitable[Any]],
    on_progress: Optional[ProgressCallback] = None,
) -> int:
    """
    Run ``worker(item, index)`` over ``items`` with at most ``limit`` in flight.

    ``limit`` is clamped to ``[1, len(items)]``. The first failure stops new
    work from being claimed; workers already running are awaited before it
    is re-raised.

    Returns:
        Number of completed items
    """
    total = len(items)
    if not total:
        return 0

    bounded = max(1, min(int(limit), total))
    cursor = _Cursor(total)
    completed = 0
    failures: List[BaseException] = []

    async def runner() -> None:
        nonlocal completed
        while True:
            index = cursor.claim()
            if index is None:
                return
            try:
                await worker(items[index], index)
            except BaseException as exc:
                cursor.exhaust()
                failures.append(exc)
                raise

            completed += 1
            if completed % PROGRESS_EVERY == 0 or completed == total:
                logger.info(f"Uploaded {completed}/{total} files")
                if on_progress:
                    outcome = on_progress(UploadProgress(completed=completed, total=total))
                    if inspect.isawaitable(outcome):
                        await outcome

    results = await asyncio.gather(*(runner() for _ in range(bounded)), return_exceptions=True)
    if failures:
        raise failures[0]
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return completed


class UploadScheduler:
    """
    Uploads file entries under a remote directory with upsert semantics.

    Every file overwrites whatever sits at its destination; missing parent
    directories are created and names are never deduplicated.
    """

    def __init__(
        self,
        fs: IRemoteFileSystem,
        concurrency: int,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self._fs = fs
        self._concurrency = concurrency
        self._on_progress = on_progress

    @staticmethod
    def plan(entries: Sequence[FileEntry], remote_root: str) -> List[UploadTask]:
        return [
            UploadTask(entry=entry, remote_path=join_remote_path(remote_root, entry.relative_path))
            for entry in entries
        ]

    async def upload(self, entries: Sequence[FileEntry], remote_root: str) -> int:
        tasks = self.plan(entries, remote_root)
        if not tasks:
            logger.info("Nothing to upload")
            return 0

        logger.info(
            f"Starting upload: {len(tasks)} files, "
            f"max {max(1, min(self._concurrency, len(tasks)))} parallel"
        )
        return await run_bounded(tasks, self._concurrency, self._upload_one, self._on_progress)

    async def _upload_one(self, task: UploadTask, index: int) -> None:
        data = await asyncio.to_thread(task.entry.absolute_path.read_bytes)
        logger.debug(f"[{index + 1}] {task.entry.relative_path} -> {task.remote_path} ({len(data)} bytes)")
        await self._fs.write(
            task.remote_path,
            data,
            overwrite=True,
            dedupe_name=False,
            create_missing_parents=True,
        )
