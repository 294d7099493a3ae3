"""
BlackV TUI: terminal chat client.

Rich-based view over the conversation: completed turns are printed
permanently, the reply that is still streaming is shown in a transient
Live region that re-renders from each conversation snapshot. Input comes
from an async prompt_toolkit session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style
from rich.console import Console, Group
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from blackv.conversation.models import Conversation, Role, Turn
from blackv.core.config import ClientConfig, config

if TYPE_CHECKING:
    from blackv.session.controller import SessionController
    from blackv.transport.base import GenerateTransport

logger = logging.getLogger(__name__)

SPINNER = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

QUIT_COMMANDS = ("/quit", "/exit", "/q")


class BlackVTUI:
    """Rich-based terminal UI for BlackV."""

    def __init__(
        self,
        controller: "SessionController",
        transport: "GenerateTransport",
        client_config: ClientConfig | None = None,
        console: Console | None = None,
    ):
        self.controller = controller
        self.transport = transport
        self.settings = client_config or config.client
        self.console = console or Console()

        self.turns: Conversation = ()
        self._spinner_idx = 0
        self._tick_task: asyncio.Task | None = None
        self._live: Live | None = None

        controller.reducer.subscribe(self._on_update)

    # ── Rendering ─────────────────────────────────────────────────────────

    def render_turn(self, turn: Turn) -> Panel:
        """Render one turn as a bordered panel. Assistant text is markdown."""
        if turn.role is Role.ASSISTANT:
            body: Any = Markdown(turn.content, code_theme=self.settings.code_theme)
            title = f"[bold magenta]{self.settings.title}[/bold magenta]"
            border = "magenta"
        else:
            # Plain Text: user input is never interpreted as markup
            body = Text(turn.content)
            title = "[bold blue]You[/bold blue]"
            border = "blue"

        return Panel(
            body,
            title=title,
            title_align="left",
            border_style=border,
            padding=(0, 1),
            expand=True,
        )

    def _pending_turns(self) -> list[Turn]:
        """Turns after the most recent user turn, i.e. the reply in progress."""
        for i in range(len(self.turns) - 1, -1, -1):
            if self.turns[i].role is Role.USER:
                return list(self.turns[i + 1 :])
        return []

    def _render(self) -> Group:
        parts: list[Any] = [self.render_turn(t) for t in self._pending_turns()]

        if self.controller.is_busy and not parts:
            spin = SPINNER[self._spinner_idx % len(SPINNER)]
            parts.append(Text(f"  {spin} thinking", style="dim magenta"))

        return Group(*parts) if parts else Group(Text(""))

    def _refresh(self) -> None:
        if self._live:
            self._live.update(self._render())

    def _on_update(self, turns: Conversation) -> None:
        self.turns = turns
        self._refresh()

    # ── Spinner tick ──────────────────────────────────────────────────────

    async def _tick_loop(self) -> None:
        """Advance spinner and refresh display while waiting."""
        try:
            while True:
                await asyncio.sleep(0.08)
                self._spinner_idx = (self._spinner_idx + 1) % len(SPINNER)
                if self.controller.is_busy:
                    self._refresh()
        except asyncio.CancelledError:
            pass

    # ── Main loop ─────────────────────────────────────────────────────────

    async def run(self) -> None:
        await self.transport.start()

        self.console.print()
        self.console.print(
            Panel(
                f"[bold magenta]{self.settings.title}[/bold magenta]: "
                f"{self.controller.model}\n"
                "Type a message and press Enter. [bold]/quit[/bold] to exit.",
                border_style="dim",
                padding=(0, 1),
            )
        )
        self.console.print()

        self._tick_task = asyncio.create_task(self._tick_loop())
        session: PromptSession = PromptSession(history=InMemoryHistory())

        try:
            while True:
                try:
                    with patch_stdout():
                        user_input = await session.prompt_async(
                            [("class:prompt", "you → ")],
                            style=_prompt_style(),
                        )
                except (EOFError, KeyboardInterrupt):
                    break

                if user_input.strip() in QUIT_COMMANDS:
                    break
                if not user_input.strip():
                    continue

                await self.send(user_input)

        finally:
            if self._tick_task:
                self._tick_task.cancel()
            await self.transport.stop()
            self.console.print("\n[dim]Goodbye.[/dim]")

    async def send(self, user_input: str) -> None:
        """Submit one message, showing the reply live until it completes."""
        start = len(self.turns)
        self._live = Live(
            self._render(),
            console=self.console,
            refresh_per_second=self.settings.refresh_per_second,
            transient=True,
        )
        try:
            with self._live:
                accepted = await self.controller.submit(user_input)
        finally:
            self._live = None

        if not accepted:
            return
        self._print_exchange(start)

    def _print_exchange(self, start: int) -> None:
        """Print the completed exchange permanently after Live closes."""
        for turn in self.turns[start:]:
            self.console.print(self.render_turn(turn))
        self.console.print()


def _prompt_style() -> Style:
    """prompt_toolkit style for the input prompt."""
    return Style.from_dict(
        {
            "prompt": "#888888",
        }
    )
