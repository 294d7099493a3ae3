"""
Transport base class: the boundary between the client and the network.

A transport opens one generation request and exposes the response body as
an async stream of decoded text chunks. Chunks carry no alignment to record
boundaries. Any rejection or network failure is raised as TransportError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncGenerator


@dataclass(frozen=True)
class GenerateRequest:
    """The outbound request body."""

    model: str
    prompt: str
    system: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {"model": self.model, "prompt": self.prompt, "system": self.system}


class GenerateTransport(ABC):
    """Generation service transport interface."""

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def stream(self, request: GenerateRequest) -> AsyncGenerator[str, None]:
        """Send the request and yield response text chunks as they arrive.

        Raises TransportError on a non-success status or a network failure.
        """
        yield  # type: ignore

    async def health_check(self) -> dict:
        return {"transport": self.__class__.__name__, "status": "unknown"}
