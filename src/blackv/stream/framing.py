"""
Line framing: turns arbitrarily split text chunks into complete records.

The generation service streams newline-delimited JSON. Network reads do not
respect record boundaries, so a record may arrive in several pieces, and one
read may carry several records. The framer holds back the incomplete tail
until the next separator arrives.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\n"


class LineFramer:
    """Splits a stream of text chunks on ``\\n``.

    One framer per streamed response. ``push`` returns the records completed
    by the chunk, in order; ``close`` ends the stream and discards whatever
    is left in the buffer.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._closed = False

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a separator."""
        return self._buffer

    def push(self, chunk: str) -> list[str]:
        if self._closed:
            raise RuntimeError("LineFramer is closed")
        if not chunk:
            return []

        pieces = (self._buffer + chunk).split(RECORD_SEPARATOR)
        # The last piece is never known to be complete until the next separator
        self._buffer = pieces.pop()
        return pieces

    def close(self) -> str:
        """End the stream. Returns the discarded (truncated) tail, if any."""
        residual, self._buffer = self._buffer, ""
        self._closed = True
        if residual:
            logger.debug(
                "Discarding truncated trailing record (%d chars)", len(residual)
            )
        return residual
