from __future__ import annotations

import logging
from typing import Optional

import httpx

from chat.models import RelayRequest, RelayResponse


logger = logging.getLogger("advisor.chat")

RELAY_PATH = "/api/gemini"
FETCH_FAILED_TEXT = "Failed to fetch response"
FALLBACK_ERROR_TEXT = "Sorry, I encountered an error. Please try again."


class RelayClientError(Exception):
    """Raised when the relay call fails; ``text`` is safe to show the user."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


class RelayClient:
    """Posts prompts to the relay endpoint.

    ``transport`` lets the page talk to the relay in-process (``httpx.ASGITransport``)
    and lets tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        kwargs = {"base_url": self.base_url, "transport": self._transport}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return httpx.AsyncClient(**kwargs)

    async def ask(self, prompt: str) -> str:
        body = RelayRequest(prompt=prompt).model_dump()
        try:
            async with self._client() as client:
                response = await client.post(RELAY_PATH, json=body)
        except httpx.HTTPError as exc:
            raise RelayClientError(FALLBACK_ERROR_TEXT) from exc

        if response.is_error:
            logger.warning("Relay answered %s", response.status_code)
            raise RelayClientError(FETCH_FAILED_TEXT)

        try:
            data = RelayResponse.model_validate(response.json())
        except ValueError as exc:
            raise RelayClientError(FALLBACK_ERROR_TEXT) from exc
        return data.text
