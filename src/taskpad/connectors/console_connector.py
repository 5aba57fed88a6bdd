# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import TaskpadError
from ..core.state import AppState
from ..ui.pages import Page

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def handle_line(state: AppState, line: str, emit: Callable[[str], None] | None = None) -> str | None:
    """
    One REPL step. Plain text on the dashboard is added as a task;
    everything else must be a slash command.
    """
    if not line.startswith("/"):
        if state.pages.current == Page.DASHBOARD:
            line = "/add " + line
        else:
            return "Use /help to list available commands."

    try:
        return await command_registry.handle(state, line, emit=emit)
    except TaskpadError as e:
        return str(e)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


async def run_console_loop(state: AppState, *, input_fn: InputFn = input) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    while True:
        prompt = f"({state.pages.current or '-'}) > "
        try:
            user_input = (await asyncio.to_thread(input_fn, prompt)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = await handle_line(state, user_input, emit=_print_ts)
        if reply:
            print(reply, flush=True)

    logger.info("Console connector finished.")
