"""
Conversation Reducer: the only writer of the conversation.

Per response, the assistant side moves through:

    no active assistant turn -> assistant turn open -> finalized

Replace-vs-append is decided by an explicit handle to the open assistant
turn (its index), set when the first text of a response arrives and cleared
at stream start, finalize and failure. Earlier turns are never touched.

Each transition builds a new tuple and hands it, in full, to every
subscriber. There is no diff protocol.
"""

from __future__ import annotations

import logging
from typing import Callable

from blackv.conversation.models import (
    ERROR_MESSAGE,
    FALLBACK_MESSAGE,
    Conversation,
    Turn,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[Conversation], None]


class ConversationReducer:
    def __init__(self) -> None:
        self._turns: Conversation = ()
        self._active: int | None = None
        self._subscribers: list[Subscriber] = []

    @property
    def turns(self) -> Conversation:
        return self._turns

    @property
    def has_open_assistant_turn(self) -> bool:
        return self._active is not None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every new snapshot. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ── Transitions ───────────────────────────────────────────────────────

    def submit_user(self, content: str) -> Conversation:
        """Append the user's turn. Always appends."""
        self._active = None
        return self._commit(self._turns + (Turn.user(content),))

    def begin_response(self) -> None:
        """A new response stream is starting; nothing is open yet."""
        self._active = None

    def update_assistant(self, text: str) -> Conversation:
        """Show the latest accumulated text in the open assistant turn."""
        return self._put_assistant(text)

    def finalize(self, text: str) -> Conversation:
        """Close the response. Blank replies become the fallback message."""
        if not text.strip():
            logger.info("Empty response, using fallback message")
            text = FALLBACK_MESSAGE
        turns = self._put_assistant(text)
        self._active = None
        return turns

    def fail(self) -> Conversation:
        """Record a failed request. Always appends, even after partial text."""
        self._active = None
        return self._commit(self._turns + (Turn.assistant(ERROR_MESSAGE),))

    # ── Internals ─────────────────────────────────────────────────────────

    def _put_assistant(self, text: str) -> Conversation:
        turn = Turn.assistant(text)
        if self._active is None:
            self._active = len(self._turns)
            return self._commit(self._turns + (turn,))

        if self._turns[self._active] == turn:
            return self._turns
        turns = self._turns[: self._active] + (turn,) + self._turns[self._active + 1 :]
        return self._commit(turns)

    def _commit(self, turns: Conversation) -> Conversation:
        self._turns = turns
        for callback in list(self._subscribers):
            try:
                callback(turns)
            except Exception as e:
                logger.error(f"Conversation subscriber failed: {e}", exc_info=True)
        return turns

    def __len__(self) -> int:
        return len(self._turns)
