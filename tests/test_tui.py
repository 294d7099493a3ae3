"""Tests for the terminal client's rendering and send flow."""

from __future__ import annotations

import io
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from blackv.conversation.models import ERROR_MESSAGE, Turn
from blackv.conversation.reducer import ConversationReducer
from blackv.core.config import ClientConfig
from blackv.core.errors import TransportError
from blackv.session.controller import SessionController
from blackv.transport.base import GenerateTransport
from blackv.tui import BlackVTUI


class StubTransport(GenerateTransport):
    def __init__(self, chunks=None, fail=False):
        self.chunks = chunks or []
        self.fail = fail
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.started = False
        self.stopped = True

    async def stream(self, request):
        if self.fail:
            raise TransportError("HTTP 502", status_code=502)
        for chunk in self.chunks:
            yield chunk


def _tui(transport: StubTransport) -> BlackVTUI:
    controller = SessionController(
        transport=transport, reducer=ConversationReducer(), model="m", system=""
    )
    console = Console(file=io.StringIO(), width=80, force_terminal=False)
    return BlackVTUI(
        controller=controller,
        transport=transport,
        client_config=ClientConfig(title="BlackV"),
        console=console,
    )


def _output(tui: BlackVTUI) -> str:
    return tui.console.file.getvalue()


def test_assistant_turn_renders_markdown():
    tui = _tui(StubTransport())
    panel = tui.render_turn(Turn.assistant("# Title\n\n```python\nx = 1\n```"))
    assert isinstance(panel, Panel)
    assert isinstance(panel.renderable, Markdown)


def test_user_turn_renders_plain_text():
    tui = _tui(StubTransport())
    panel = tui.render_turn(Turn.user("[bold]not markup[/bold] <b>"))
    assert isinstance(panel.renderable, Text)
    assert panel.renderable.plain == "[bold]not markup[/bold] <b>"


def test_tui_tracks_conversation_snapshots():
    tui = _tui(StubTransport())
    tui.controller.reducer.submit_user("Hi")
    assert tui.turns == (Turn.user("Hi"),)


@pytest.mark.asyncio
async def test_send_prints_completed_exchange():
    chunks = [json.dumps({"response": "Hello there"}) + "\n"]
    tui = _tui(StubTransport(chunks))

    await tui.send("Hi")

    out = _output(tui)
    assert "Hi" in out
    assert "Hello there" in out
    assert tui.turns == (Turn.user("Hi"), Turn.assistant("Hello there"))
    assert tui._pending_turns() == [Turn.assistant("Hello there")]


@pytest.mark.asyncio
async def test_send_shows_error_turn_on_failure():
    tui = _tui(StubTransport(fail=True))
    await tui.send("Hi")
    assert ERROR_MESSAGE in _output(tui)


@pytest.mark.asyncio
async def test_send_blank_prints_nothing():
    tui = _tui(StubTransport())
    await tui.send("   ")
    assert tui.turns == ()
    assert _output(tui).strip() == ""


# ── Prompt loop ────────────────────────────────────────────


async def _run_with_inputs(tui: BlackVTUI, inputs) -> AsyncMock:
    """Drive run() with a scripted prompt; returns the prompt_async mock."""
    session = MagicMock()
    session.prompt_async = AsyncMock(side_effect=inputs)
    with patch("blackv.tui.PromptSession", return_value=session), patch(
        "blackv.tui.patch_stdout"
    ):
        await tui.run()
    return session.prompt_async


@pytest.mark.asyncio
async def test_run_skips_blank_input_and_quits():
    transport = StubTransport([json.dumps({"response": "Hello"}) + "\n"])
    tui = _tui(transport)

    prompt = await _run_with_inputs(tui, ["", "   ", "Hi", "/quit"])

    assert prompt.await_count == 4
    assert tui.turns == (Turn.user("Hi"), Turn.assistant("Hello"))
    assert transport.stopped is True
    out = _output(tui)
    assert "BlackV" in out
    assert "Goodbye." in out


@pytest.mark.asyncio
@pytest.mark.parametrize("command", ["/quit", "/exit", "/q", "  /q  "])
async def test_run_quit_commands_end_loop(command):
    transport = StubTransport()
    tui = _tui(transport)

    prompt = await _run_with_inputs(tui, [command, "never read"])

    assert prompt.await_count == 1
    assert tui.turns == ()
    assert transport.stopped is True


@pytest.mark.asyncio
@pytest.mark.parametrize("exc", [EOFError, KeyboardInterrupt])
async def test_run_ends_on_eof_or_interrupt(exc):
    transport = StubTransport()
    tui = _tui(transport)

    await _run_with_inputs(tui, [exc()])

    assert transport.stopped is True
    assert "Goodbye." in _output(tui)


@pytest.mark.asyncio
async def test_run_starts_transport_before_prompting():
    transport = StubTransport()
    tui = _tui(transport)
    started_when_prompted = []

    async def prompt(*args, **kwargs):
        started_when_prompted.append(transport.started)
        return "/quit"

    session = MagicMock()
    session.prompt_async = prompt
    with patch("blackv.tui.PromptSession", return_value=session), patch(
        "blackv.tui.patch_stdout"
    ):
        await tui.run()

    assert started_when_prompted == [True]
