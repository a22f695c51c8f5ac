"""File collection utilities for deploys."""
import logging
import os
import stat
from pathlib import Path
from typing import List

from ..errors import InvalidSourceError
from ..models import FileEntry

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


class FileCollector:
    """Collects the regular files under a deploy source."""

    @staticmethod
    def is_hidden(name: str) -> bool:
        return name.startswith(HIDDEN_PREFIX)

    @staticmethod
    def collect_files(source: Path, include_hidden: bool = False) -> List[FileEntry]:
        """
        Collect all regular files recursively.

        Symlinks are never followed. Hidden entries (and everything below a
        hidden directory) are skipped unless ``include_hidden`` is set.

        Args:
            source: File or folder to deploy
            include_hidden: Keep dot-files and dot-directories

        Returns:
            File entries sorted by relative path

        Raises:
            InvalidSourceError: if ``source`` is neither a file nor a directory
        """
        source = Path(source)
        try:
            mode = source.lstat().st_mode
        except OSError as exc:
            raise InvalidSourceError(
                f"source_path must be a file or directory. Received: {source}"
            ) from exc

        if stat.S_ISREG(mode):
            return [FileEntry(absolute_path=source, relative_path=source.name)]

        if not stat.S_ISDIR(mode):
            raise InvalidSourceError(f"source_path must be a file or directory. Received: {source}")

        files: List[FileEntry] = []
        FileCollector._walk(source, source, include_hidden, files)
        return sorted(files, key=lambda entry: entry.relative_path)

    @staticmethod
    def _walk(root: Path, current: Path, include_hidden: bool, files: List[FileEntry]) -> None:
        with os.scandir(current) as entries:
            for entry in entries:
                if not include_hidden and FileCollector.is_hidden(entry.name):
                    continue

                path = Path(entry.path)
                if entry.is_symlink():
                    logger.info(f"Skipping symlink: {path}")
                elif entry.is_dir(follow_symlinks=False):
                    FileCollector._walk(root, path, include_hidden, files)
                elif entry.is_file(follow_symlinks=False):
                    relative = path.relative_to(root).as_posix()
                    files.append(FileEntry(absolute_path=path, relative_path=relative))
