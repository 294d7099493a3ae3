"""
Transport layer: opens generation requests and streams the response body.

- GenerateTransport: abstract interface
- GenerateRequest: the {model, prompt, system} request body
- OllamaTransport: httpx implementation for Ollama's /api/generate
"""

from blackv.transport.base import GenerateRequest, GenerateTransport
from blackv.transport.ollama import OllamaTransport

__all__ = ["GenerateRequest", "GenerateTransport", "OllamaTransport"]
