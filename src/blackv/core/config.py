"""
BlackV Configuration: single source of truth for all settings.

Reads from environment variables with sensible defaults.
No config files, no YAML. Just env vars (and an optional .env).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


DEFAULT_SYSTEM_PROMPT = (
    "You are BlackV, a helpful assistant. Answer clearly and concisely. "
    "Use markdown for structure and fenced code blocks for code."
)


@dataclass(frozen=True)
class GenerateConfig:
    """Generation service settings."""

    url: str = "http://localhost:11434/api/generate"
    model: str = "llama3.2"
    system: str = DEFAULT_SYSTEM_PROMPT
    timeout: float = 120.0  # seconds, read timeout between chunks
    connect_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> GenerateConfig:
        return cls(
            url=os.getenv("BLACKV_URL", "http://localhost:11434/api/generate"),
            model=os.getenv("BLACKV_MODEL", "llama3.2"),
            system=os.getenv("BLACKV_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
            timeout=float(os.getenv("BLACKV_TIMEOUT", "120.0")),
            connect_timeout=float(os.getenv("BLACKV_CONNECT_TIMEOUT", "10.0")),
        )


@dataclass(frozen=True)
class ClientConfig:
    """Terminal client settings."""

    title: str = "BlackV"
    refresh_per_second: int = 12
    code_theme: str = "github-dark"

    @classmethod
    def from_env(cls) -> ClientConfig:
        return cls(
            title=os.getenv("BLACKV_TITLE", "BlackV"),
            refresh_per_second=int(os.getenv("BLACKV_REFRESH_PER_SECOND", "12")),
            code_theme=os.getenv("BLACKV_CODE_THEME", "github-dark"),
        )


@dataclass(frozen=True)
class BlackVConfig:
    """Root configuration."""

    generate: GenerateConfig = field(default_factory=GenerateConfig)
    client: ClientConfig = field(default_factory=ClientConfig)

    @classmethod
    def from_env(cls) -> BlackVConfig:
        return cls(
            generate=GenerateConfig.from_env(),
            client=ClientConfig.from_env(),
        )


# Singleton: import this wherever you need config
config = BlackVConfig.from_env()
