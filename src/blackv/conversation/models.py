"""
Conversation models: the turns that make up a dialogue.

All models are frozen dataclasses. A conversation is a tuple of Turns;
every change produces a new tuple, so a reader holding a snapshot never
sees it change underneath them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Who a turn is attributed to."""

    USER = "user"
    ASSISTANT = "assistant"


# Shown instead of an empty assistant reply
FALLBACK_MESSAGE = "I'm sorry, but I couldn't generate a response."

# Shown when the request fails
ERROR_MESSAGE = "Error: Could not fetch response."


@dataclass(frozen=True)
class Turn:
    """One message in the conversation."""

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Turn:
        return cls(role=Role.ASSISTANT, content=content)

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


Conversation = tuple[Turn, ...]
