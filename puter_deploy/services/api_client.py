"""HTTP adapter for Puter API operations."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import RemoteAPIError
from ..utils.serialization import safe_json

logger = logging.getLogger(__name__)


class PuterClient:
    """
    Authenticated HTTP client scoped to one deployment run.

    Raises ``RemoteAPIError`` for every non-2xx response and for
    ``{"success": false}`` driver results. Never retries.

    Usage:
        async with PuterClient(token) as client:
            entry = await client.post_json("/stat", {"path": "/me/site"})
    """

    def __init__(
        self,
        token: str,
        api_origin: str = "https://api.puter.com",
        timeout: float = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token = token
        self._api_origin = api_origin
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._api_origin,
            timeout=self._timeout,
            headers={"Authorization": f"Bearer {self._token}"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("PuterClient not initialized. Use 'async with' context.")
        return self._client

    async def post_json(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        client = self._require_client()
        logger.debug(f"POST {endpoint} {safe_json(payload)}")
        response = await client.post(endpoint, json=payload)
        return self._parse(response, endpoint)

    async def post_multipart(
        self,
        endpoint: str,
        fields: Dict[str, str],
        files: Dict[str, Any],
    ) -> Any:
        client = self._require_client()
        logger.debug(f"POST {endpoint} (multipart) {safe_json(fields)}")
        response = await client.post(endpoint, data=fields, files=files)
        return self._parse(response, endpoint)

    async def call_driver(self, interface: str, method: str, args: Dict[str, Any]) -> Any:
        """Invoke a driver method and unwrap its ``result``."""
        body = await self.post_json(
            "/drivers/call",
            {"interface": interface, "method": method, "args": args},
        )
        if isinstance(body, dict) and "success" in body:
            if not body.get("success"):
                raise self._error_from_payload(body, None, f"{interface}.{method}")
            return body.get("result")
        return body

    def _parse(self, response: httpx.Response, endpoint: str) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.status_code >= 400:
            raise self._error_from_payload(body, response.status_code, f"POST {endpoint}")
        return body

    @staticmethod
    def _error_from_payload(body: Any, status: Optional[int], context: str) -> RemoteAPIError:
        error = body.get("error", body) if isinstance(body, dict) else {}
        if not isinstance(error, dict):
            error = {"message": str(error)}
        message = error.get("message") or (body if isinstance(body, str) and body else None)
        code = error.get("code")
        if status is None and isinstance(error.get("status"), int):
            status = error["status"]
        return RemoteAPIError(
            f"API error on {context}: {message or safe_json(body)}",
            code=str(code) if code else None,
            status=status,
            payload=body,
        )
