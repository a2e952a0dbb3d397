import logging
from typing import Any, Dict, Optional

import httpx

from initiate.app.config.settings import Settings
from initiate.app.models.domain.error import (
    MalformedResponseError,
    UpstreamAPIError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Blockchain explorer"


class ExplorerService:
    """
    Client for an Etherscan-compatible explorer API (Blockscout).

    Every call is a GET with `module`/`action` plus call-specific query
    parameters; the response envelope is `{status, message, result}`.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = settings.EXPLORER_API_URL
        self.timeout = settings.httpx_timeout
        self.transport = transport

    async def query(
        self, module: str, action: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Make a GET request to the explorer API.

        Args:
            module: Explorer module (account, contract, token, transaction)
            action: Action inside the module
            params: Extra query parameters, already filtered to present values

        Returns:
            The decoded JSON envelope
        """
        query_params = {"module": module, "action": action, **(params or {})}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.base_url, params=query_params)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Explorer API error for {module}/{action}: "
                f"{e.response.status_code} - {e.response.text}"
            )
            raise UpstreamAPIError(
                SERVICE_NAME, e.response.status_code, e.response.text
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error in explorer call {module}/{action}: {e}")
            raise UpstreamAPIError(SERVICE_NAME, None, str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(SERVICE_NAME, response.text) from e
