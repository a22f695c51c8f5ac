"""
Remote filesystem service - Single Responsibility: stat/mkdir/write on Puter.

Implements IRemoteFileSystem.
"""
import json
import logging
import mimetypes
import posixpath
from typing import Any, Dict

from .api_client import PuterClient

logger = logging.getLogger(__name__)


class PuterFileSystem:
    """Remote filesystem operations over a shared ``PuterClient``."""

    def __init__(self, client: PuterClient):
        self._client = client

    async def stat(self, path: str) -> Dict[str, Any]:
        return await self._client.post_json("/stat", {"path": path})

    async def mkdir(self, path: str, create_missing_parents: bool = True) -> Dict[str, Any]:
        logger.debug(f"mkdir {path} (create_missing_parents={create_missing_parents})")
        return await self._client.post_json("/mkdir", {
            "path": path,
            "overwrite": False,
            "dedupe_name": False,
            "create_missing_parents": create_missing_parents,
        })

    async def write(
        self,
        path: str,
        data: bytes,
        overwrite: bool = True,
        dedupe_name: bool = False,
        create_missing_parents: bool = True,
    ) -> Dict[str, Any]:
        """
        Upload ``data`` to ``path``.

        Args:
            path: Full remote file path
            data: File contents
            overwrite: Replace an existing file at ``path``
            dedupe_name: Let the server rename on conflict
            create_missing_parents: Create missing directories on the way

        Returns:
            Metadata of the written file
        """
        parent, name = posixpath.split(path)
        mimetype = mimetypes.guess_type(name)[0] or "application/octet-stream"
        operation = {
            "op": "write",
            "path": parent or "/",
            "name": name,
            "overwrite": overwrite,
            "dedupe_name": dedupe_name,
            "create_missing_parents": create_missing_parents,
        }
        fileinfo = {"name": name, "type": mimetype, "size": len(data)}
        body = await self._client.post_multipart(
            "/batch",
            fields={"operation": json.dumps(operation), "fileinfo": json.dumps(fileinfo)},
            files={"file": (name, data, mimetype)},
        )
        # /batch answers with one result per operation
        if isinstance(body, dict) and isinstance(body.get("results"), list):
            body = body["results"]
        if isinstance(body, list):
            return body[0] if body else {}
        return body
