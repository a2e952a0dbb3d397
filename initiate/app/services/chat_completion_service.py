import logging
from typing import Any, Dict, List, Optional

import httpx

from initiate.app.config.settings import Settings
from initiate.app.models.domain.error import (
    MalformedResponseError,
    MissingCredentialError,
    UpstreamAPIError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Chat completion API"


class ChatCompletionService:
    """
    Thin client for an OpenAI-compatible chat completion endpoint.
    Transport failures are reported, never retried here.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.CHAT_API_KEY
        self.model = settings.CHAT_MODEL
        self.url = settings.CHAT_COMPLETIONS_URL
        self.timeout = settings.httpx_timeout
        self.transport = transport

    async def completions(
        self,
        messages: List[Dict[str, Any]],
        tools: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Get a non-streaming completion for the given conversation.

        Args:
            messages: The ordered conversation so far
            tools: Tool schemas in OpenAI function format

        Returns:
            The decoded response JSON ({"choices": [...], ...})
        """
        if not self.api_key:
            raise MissingCredentialError("CHAT_API_KEY")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": messages,
            "tools": tools,
            "stream": False,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    url=self.url, headers=headers, json=payload
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Chat API error: {e.response.status_code} - {e.response.text}"
            )
            raise UpstreamAPIError(
                SERVICE_NAME, e.response.status_code, e.response.text
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error in chat API call: {str(e)}")
            raise UpstreamAPIError(SERVICE_NAME, None, str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(SERVICE_NAME, response.text) from e
