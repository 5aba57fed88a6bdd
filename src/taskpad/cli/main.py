# src/taskpad/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the startup sequence and then the
console REPL until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, start_app
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    store = getattr(state, "store", None)
    if store is None or not hasattr(store, "close"):
        return
    try:
        store.close()
    except Exception:
        logger.debug("Store close failed.", exc_info=True)


async def _run(state) -> None:
    await start_app(state, emit=print)
    await run_console_loop(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s... (log file %s)", settings.app_name, log_file)

    state = create_initial_state(settings=settings, notify=print)
    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
