"""
Streaming response decoding.

Turns the raw text of a newline-delimited JSON response into a growing
assistant reply:

- LineFramer: chunks -> complete records
- decode_record: record -> Fragment | DecodeFailure
- TurnAccumulator: Fragments -> accumulated text
- StreamPipeline: all three, for one response
"""

from blackv.stream.accumulator import TurnAccumulator
from blackv.stream.decoder import DecodeFailure, DecodeResult, Fragment, decode_record
from blackv.stream.framing import LineFramer
from blackv.stream.pipeline import StreamPipeline

__all__ = [
    "LineFramer",
    "Fragment",
    "DecodeFailure",
    "DecodeResult",
    "decode_record",
    "TurnAccumulator",
    "StreamPipeline",
]
