"""
Stream pipeline: chains framing, decoding and accumulation for one response.

Chunk goes in one end, updated assistant text comes out the other:

    chunk -> LineFramer -> records -> decode_record -> Fragments
          -> TurnAccumulator -> accumulated text (one per Fragment)

Every chunk is processed completely before the next one is accepted, so the
output order is the arrival order. A record that fails to decode is logged
and skipped; it never stops the stream.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, AsyncIterable

from blackv.stream.accumulator import TurnAccumulator
from blackv.stream.decoder import DecodeFailure, decode_record
from blackv.stream.framing import LineFramer

logger = logging.getLogger(__name__)


class StreamPipeline:
    """
    Decoder state for a single streamed response.

    Create one per response. ``feed`` returns the accumulated text after each
    decoded fragment; ``finish`` closes the framer and returns the final text.
    """

    def __init__(self) -> None:
        self.framer = LineFramer()
        self.accumulator = TurnAccumulator()
        self.records = 0
        self.failures = 0
        self.done_seen = False

    @property
    def text(self) -> str:
        return self.accumulator.text

    def feed(self, chunk: str) -> list[str]:
        updates: list[str] = []
        for record in self.framer.push(chunk):
            self.records += 1
            result = decode_record(record)
            if isinstance(result, DecodeFailure):
                self.failures += 1
                logger.warning(
                    "Skipping undecodable record (%s): %r",
                    result.reason,
                    result.preview,
                )
                continue
            if result.done:
                # Stream end, not this flag, finalizes the turn
                self.done_seen = True
                logger.debug("Service reported done after %d records", self.records)
            updates.append(self.accumulator.extend(result))
        return updates

    def finish(self) -> str:
        self.framer.close()
        return self.accumulator.text

    async def run(self, chunks: AsyncIterable[str]) -> AsyncGenerator[str, None]:
        """Convenience: drive a whole chunk stream, yielding each text update."""
        async for chunk in chunks:
            for text in self.feed(chunk):
                yield text
        self.finish()

    def __repr__(self) -> str:
        return (
            f"StreamPipeline[records={self.records}, failures={self.failures}, "
            f"chars={len(self.text)}]"
        )
