"""
Event decoding: one framed record in, one Fragment (or DecodeFailure) out.

Records look like ``{"model": "...", "response": "Hel", "done": false}``.
Only ``response`` matters for the conversation; ``done`` is decoded so it
can be logged, but stream end is what finishes a turn.

Decoding never raises: a bad record becomes a DecodeFailure and the
caller moves on to the next one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Fragment:
    """One increment of assistant text."""

    text: str
    done: bool = False


@dataclass(frozen=True)
class DecodeFailure:
    """A record that could not be decoded."""

    record: str
    reason: str

    @property
    def preview(self) -> str:
        return self.record if len(self.record) <= 80 else self.record[:77] + "..."


DecodeResult = Union[Fragment, DecodeFailure]


def decode_record(record: str) -> DecodeResult:
    try:
        payload = json.loads(record)
    except json.JSONDecodeError as e:
        return DecodeFailure(record=record, reason=f"invalid JSON: {e.msg}")
    except RecursionError:
        return DecodeFailure(record=record, reason="invalid JSON: nesting too deep")
    except ValueError as e:
        return DecodeFailure(record=record, reason=f"invalid JSON: {e}")

    if not isinstance(payload, dict):
        return DecodeFailure(
            record=record, reason=f"expected object, got {type(payload).__name__}"
        )

    text = payload.get("response")
    if not isinstance(text, str):
        return DecodeFailure(record=record, reason="missing string 'response' field")

    return Fragment(text=text, done=bool(payload.get("done", False)))
