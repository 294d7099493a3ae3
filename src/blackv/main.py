"""
BlackV entry point.

Usage: blackv [--url URL] [--model NAME] [--system PROMPT]
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from blackv.conversation.reducer import ConversationReducer
from blackv.core.config import config
from blackv.core.logging import setup_logging
from blackv.session.controller import SessionController
from blackv.transport.ollama import OllamaTransport
from blackv.tui import BlackVTUI

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BlackV terminal chat client")
    parser.add_argument(
        "--url", default=config.generate.url, help="Generation endpoint URL"
    )
    parser.add_argument(
        "--model", default=config.generate.model, help="Model name to request"
    )
    parser.add_argument(
        "--system", default=config.generate.system, help="System prompt"
    )
    return parser


def build_tui(args: argparse.Namespace) -> BlackVTUI:
    transport = OllamaTransport(url=args.url)
    controller = SessionController(
        transport=transport,
        reducer=ConversationReducer(),
        model=args.model,
        system=args.system,
    )
    return BlackVTUI(controller=controller, transport=transport)


def main() -> None:
    args = build_parser().parse_args()
    setup_logging()
    logger.info("Starting BlackV (url=%s, model=%s)", args.url, args.model)

    tui = build_tui(args)
    try:
        asyncio.run(tui.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
