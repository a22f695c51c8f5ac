"""
Hosting service - Single Responsibility: subdomain bindings.

Implements IHostingAPI on top of the ``puter-subdomains`` driver.
"""
import logging
from typing import Any, Dict, Optional

from .api_client import PuterClient

logger = logging.getLogger(__name__)

SUBDOMAINS_INTERFACE = "puter-subdomains"


class PuterHosting:
    """Read, create and update subdomain bindings."""

    def __init__(self, client: PuterClient):
        self._client = client

    async def get(self, subdomain: str) -> Dict[str, Any]:
        return await self._client.call_driver(
            SUBDOMAINS_INTERFACE, "read", {"id": {"subdomain": subdomain}}
        )

    async def create(self, subdomain: str, root_dir: str) -> Optional[Dict[str, Any]]:
        logger.debug(f"Creating binding {subdomain} -> {root_dir}")
        return await self._client.call_driver(
            SUBDOMAINS_INTERFACE,
            "create",
            {"object": {"subdomain": subdomain, "root_dir": root_dir}},
        )

    async def update(self, subdomain: str, root_dir: str) -> Optional[Dict[str, Any]]:
        logger.debug(f"Updating binding {subdomain} -> {root_dir}")
        return await self._client.call_driver(
            SUBDOMAINS_INTERFACE,
            "update",
            {
                "id": {"subdomain": subdomain},
                "object": {"subdomain": subdomain, "root_dir": root_dir},
            },
        )
