"""Remote directory ensurer."""
import logging

from ..errors import DirectoryCreationError, PathConflictError, is_already_exists, is_not_found
from ..models import RemoteEntry
from ..protocols import IRemoteFileSystem
from ..utils.serialization import safe_json

logger = logging.getLogger(__name__)


async def ensure_remote_directory(fs: IRemoteFileSystem, path: str) -> RemoteEntry:
    """
    Make sure ``path`` exists on the remote store as a directory.

    stat -> (not found) mkdir -> stat. A mkdir that reports "already exists"
    lost a creation race; the final stat decides.

    Raises:
        PathConflictError: a non-directory occupies ``path``
        DirectoryCreationError: ``path`` is still not a directory after mkdir
    """
    try:
        existing = await fs.stat(path)
    except Exception as exc:
        if not is_not_found(exc):
            raise
        logger.info(f"Remote directory not found, creating: {path}")
    else:
        entry = RemoteEntry.from_payload(existing)
        if not entry.is_dir:
            raise PathConflictError(
                f"Puter path exists but is not a directory: {path}. stat={safe_json(existing)}"
            )
        logger.debug(f"Remote directory exists: {path} (uid: {entry.uid})")
        return entry

    try:
        await fs.mkdir(path, create_missing_parents=True)
    except Exception as exc:
        if not is_already_exists(exc):
            raise
        logger.info(f"mkdir reported existing directory, rechecking target: {exc}")

    created = await fs.stat(path)
    entry = RemoteEntry.from_payload(created)
    if not entry.is_dir:
        raise DirectoryCreationError(
            f"Failed to create Puter directory: {path}. stat={safe_json(created)}"
        )
    logger.info(f"Remote directory ready: {path} (uid: {entry.uid})")
    return entry
