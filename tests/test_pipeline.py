"""Tests for TurnAccumulator and StreamPipeline: chunks to accumulated text."""

import json
import logging

import pytest

from blackv.stream.accumulator import TurnAccumulator
from blackv.stream.decoder import Fragment
from blackv.stream.pipeline import StreamPipeline


def _records(*texts: str, done_last: bool = False) -> str:
    lines = []
    for i, text in enumerate(texts):
        done = done_last and i == len(texts) - 1
        lines.append(json.dumps({"model": "m", "response": text, "done": done}))
    return "".join(line + "\n" for line in lines)


async def _agen(chunks):
    for chunk in chunks:
        yield chunk


# ── TurnAccumulator ─────────────────────────────────────────


def test_accumulator_appends_verbatim():
    acc = TurnAccumulator()
    assert acc.extend(Fragment("Hel")) == "Hel"
    assert acc.extend(Fragment("lo, ")) == "Hello, "
    assert acc.extend(Fragment("world")) == "Hello, world"
    assert acc.fragment_count == 3


def test_accumulator_keeps_whitespace_and_repeats():
    acc = TurnAccumulator()
    acc.extend(Fragment(" a "))
    acc.extend(Fragment(" a "))
    assert acc.text == " a  a "


def test_accumulator_starts_empty():
    assert TurnAccumulator().text == ""


# ── StreamPipeline ──────────────────────────────────────────


def test_feed_yields_intermediate_states_in_order():
    pipeline = StreamPipeline()
    updates = pipeline.feed(_records("Hel", "lo, ", "world"))
    assert updates == ["Hel", "Hello, ", "Hello, world"]
    assert pipeline.finish() == "Hello, world"


def test_feed_across_split_chunks():
    stream = _records("Hel", "lo, ", "world")
    pipeline = StreamPipeline()
    updates = []
    for i in range(0, len(stream), 7):
        updates.extend(pipeline.feed(stream[i : i + 7]))
    assert updates == ["Hel", "Hello, ", "Hello, world"]


def test_malformed_record_is_skipped(caplog):
    stream = (
        '{"response":"Hel"}\n'
        "not json at all\n"
        '{"response":"lo"}\n'
    )
    pipeline = StreamPipeline()
    with caplog.at_level(logging.WARNING, logger="blackv.stream.pipeline"):
        updates = pipeline.feed(stream)

    assert updates == ["Hel", "Hello"]
    assert pipeline.records == 3
    assert pipeline.failures == 1
    assert "Skipping undecodable record" in caplog.text


def test_malformed_record_gives_same_text_as_without_it():
    with_bad = StreamPipeline()
    with_bad.feed('{"response":"a"}\n{"response":\n{"response":"b"}\n')
    without = StreamPipeline()
    without.feed('{"response":"a"}\n{"response":"b"}\n')
    assert with_bad.finish() == without.finish() == "ab"


def test_truncated_trailing_record_is_lost():
    pipeline = StreamPipeline()
    pipeline.feed('{"response":"a"}\n{"response":"b"}')
    assert pipeline.finish() == "a"
    assert pipeline.records == 1


def test_done_flag_does_not_stop_decoding():
    pipeline = StreamPipeline()
    updates = pipeline.feed(_records("a", done_last=True) + _records("b"))
    assert updates == ["a", "ab"]
    assert pipeline.done_seen is True


@pytest.mark.asyncio
async def test_run_drives_whole_stream():
    stream = _records("Hel", "lo, ", "world")
    chunks = [stream[:5], stream[5:30], stream[30:]]
    pipeline = StreamPipeline()
    updates = [text async for text in pipeline.run(_agen(chunks))]
    assert updates == ["Hel", "Hello, ", "Hello, world"]
    assert pipeline.text == "Hello, world"


def test_repr_mentions_counts():
    pipeline = StreamPipeline()
    pipeline.feed('{"response":"ab"}\n')
    assert "records=1" in repr(pipeline)
    assert "chars=2" in repr(pipeline)


def test_deeply_nested_record_is_skipped(caplog):
    stream = '{"response":"a"}\n' + "[" * 100_000 + '\n{"response":"b"}\n'
    pipeline = StreamPipeline()
    with caplog.at_level(logging.WARNING, logger="blackv.stream.pipeline"):
        updates = pipeline.feed(stream)

    assert updates == ["a", "ab"]
    assert pipeline.failures == 1
    assert "nesting too deep" in caplog.text
