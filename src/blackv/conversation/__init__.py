"""
Conversation state: the ordered dialogue transcript.

- Turn / Role: one message and who said it
- ConversationReducer: the state machine that appends turns and grows
  the open assistant turn while a response streams in
"""

from blackv.conversation.models import (
    ERROR_MESSAGE,
    FALLBACK_MESSAGE,
    Conversation,
    Role,
    Turn,
)
from blackv.conversation.reducer import ConversationReducer

__all__ = [
    "Turn",
    "Role",
    "Conversation",
    "FALLBACK_MESSAGE",
    "ERROR_MESSAGE",
    "ConversationReducer",
]
