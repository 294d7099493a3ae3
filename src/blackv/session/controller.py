"""
Session Controller: runs one request/response cycle per user submission.

    submit("Hi")
      -> reducer.submit_user("Hi")
      -> transport.stream(request)         (awaits headers, then each chunk)
      -> StreamPipeline.feed(chunk)        (frame -> decode -> accumulate)
      -> reducer.update_assistant(text)    (per decoded fragment)
      -> reducer.finalize(text)            (at stream end)
         or reducer.fail()                 (on TransportError)

Only one request is in flight at a time. While BUSY, submissions are
rejected, not queued. There is no cancellation: a request runs until the
stream ends or the transport fails.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from blackv.core.config import config
from blackv.core.errors import TransportError
from blackv.core.logging import StreamTimer
from blackv.stream.pipeline import StreamPipeline
from blackv.transport.base import GenerateRequest

if TYPE_CHECKING:
    from blackv.conversation.reducer import ConversationReducer
    from blackv.transport.base import GenerateTransport

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Whether the session can accept a new submission."""

    IDLE = "idle"
    BUSY = "busy"  # A request is in flight


class SessionController:
    """
    Orchestrates submissions against one conversation.

    The controller never touches the conversation directly; every change
    goes through the reducer's transitions.
    """

    def __init__(
        self,
        transport: "GenerateTransport",
        reducer: "ConversationReducer",
        model: str | None = None,
        system: str | None = None,
    ) -> None:
        self._transport = transport
        self._reducer = reducer
        self.model = model or config.generate.model
        self.system = system if system is not None else config.generate.system
        self._status = SessionStatus.IDLE

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_busy(self) -> bool:
        return self._status is SessionStatus.BUSY

    @property
    def reducer(self) -> "ConversationReducer":
        return self._reducer

    async def submit(self, user_text: str) -> bool:
        """
        Submit one user turn and stream the reply into the conversation.

        Returns False (and changes nothing) when a request is already in
        flight or the text is blank. Returns True once the cycle has run,
        whether it ended in a reply or in an error turn.
        """
        if self._status is SessionStatus.BUSY:
            logger.info("Submission rejected: a request is already in flight")
            return False
        if not user_text.strip():
            return False

        self._status = SessionStatus.BUSY
        try:
            self._reducer.submit_user(user_text)
            self._reducer.begin_response()
            await self._stream_reply(user_text)
        finally:
            self._status = SessionStatus.IDLE
        return True

    async def _stream_reply(self, user_text: str) -> None:
        request = GenerateRequest(model=self.model, prompt=user_text, system=self.system)
        pipeline = StreamPipeline()
        timer = StreamTimer()
        chunks = 0

        try:
            async for chunk in self._transport.stream(request):
                chunks += 1
                timer.mark("first_chunk")
                for text in pipeline.feed(chunk):
                    self._reducer.update_assistant(text)
        except TransportError as e:
            logger.error(
                f"Generation failed: {e}",
                extra={"model": self.model, "status_code": e.status_code},
            )
            self._reducer.fail()
            return

        text = pipeline.finish()
        timer.mark("stream_end")
        self._reducer.finalize(text)

        logger.info(
            "Response complete (%s)",
            timer.summary(),
            extra={
                "model": self.model,
                "duration_ms": round(timer.total() * 1000),
                "chunks": chunks,
                "records": pipeline.records,
                "failures": pipeline.failures,
            },
        )
