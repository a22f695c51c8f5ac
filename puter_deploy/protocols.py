"""
Protocols (Interfaces) for the remote collaborators.

The deploy core only relies on their success / failure / not-found contract.
"""
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class IRemoteFileSystem(Protocol):
    """Interface for remote filesystem operations."""

    async def stat(self, path: str) -> Dict[str, Any]:
        """Return metadata for ``path``; raise a not-found error if missing."""
        ...

    async def mkdir(self, path: str, create_missing_parents: bool = True) -> Dict[str, Any]:
        """Create a directory."""
        ...

    async def write(
        self,
        path: str,
        data: bytes,
        overwrite: bool = True,
        dedupe_name: bool = False,
        create_missing_parents: bool = True,
    ) -> Dict[str, Any]:
        """Write file contents at ``path``."""
        ...


@runtime_checkable
class IHostingAPI(Protocol):
    """Interface for subdomain bindings."""

    async def get(self, subdomain: str) -> Dict[str, Any]:
        """Return the binding for ``subdomain``; raise a not-found error if absent."""
        ...

    async def create(self, subdomain: str, root_dir: str) -> Optional[Dict[str, Any]]:
        """Bind ``subdomain`` to the directory at ``root_dir``."""
        ...

    async def update(self, subdomain: str, root_dir: str) -> Optional[Dict[str, Any]]:
        """Rebind ``subdomain`` to the directory at ``root_dir``."""
        ...
