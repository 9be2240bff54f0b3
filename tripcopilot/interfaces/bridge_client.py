"""
Web App Bridge Client
JSON POST calls to the sibling web app for live travel data
(flight status, transit suggestions).
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from ..config import settings
from ..errors import BridgeError


class BridgeClient:
    """
    Posts JSON to the web app and returns the decoded object

    Args:
        base_url: Web app origin, trailing slash ignored
        timeout: Per-call timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.NEXT_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.NEXT_API_TIMEOUT
        self.transport = transport

    async def post_json(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Raises:
            BridgeError: transport failure, status >= 300, or a non-object body
        """
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"Bridge call {path} failed: {e}")
            raise BridgeError(str(e) or e.__class__.__name__) from e

        if response.status_code >= 300:
            raise BridgeError(f"next bridge error ({response.status_code}): {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise BridgeError(f"invalid bridge response from {path}: {e}") from e
        if not isinstance(data, dict):
            raise BridgeError(f"invalid bridge response from {path}: expected a JSON object")
        return data
