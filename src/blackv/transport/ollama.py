"""
Ollama transport: streaming POST to /api/generate.

The service answers with newline-delimited JSON. This transport does not
parse it; it only yields the body as text, decoded incrementally so a UTF-8
character split across two reads comes out whole.

One attempt per request. No retry.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

import httpx

from blackv.core.config import config
from blackv.core.errors import TransportError
from blackv.transport.base import GenerateRequest, GenerateTransport

logger = logging.getLogger(__name__)


class OllamaTransport(GenerateTransport):
    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or config.generate.url
        self.timeout = timeout if timeout is not None else config.generate.timeout
        self.connect_timeout = (
            connect_timeout
            if connect_timeout is not None
            else config.generate.connect_timeout
        )
        self._transport = transport
        self.client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        if self.client:
            return  # Already started

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            headers={"Content-Type": "application/json"},
            transport=self._transport,
        )
        logger.info(f"Ollama transport ready (url={self.url})")

    async def stop(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def stream(self, request: GenerateRequest) -> AsyncGenerator[str, None]:
        if not self.client:
            raise RuntimeError("Ollama transport not started")

        try:
            async with self.client.stream(
                "POST", self.url, json=request.to_payload()
            ) as response:
                response.raise_for_status()
                logger.debug(
                    "Streaming response from %s",
                    self.url,
                    extra={"model": request.model, "status_code": response.status_code},
                )
                async for text in response.aiter_text():
                    if text:
                        yield text
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(
                f"Generation request rejected (HTTP {status})", status_code=status
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Generation request failed: {e}") from e

    async def health_check(self) -> dict:
        status = "ready" if self.client else "not_started"
        return {"transport": "ollama", "url": self.url, "status": status}
