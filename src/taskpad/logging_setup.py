# src/taskpad/logging_setup.py

"""
Logging for the console app.

The REPL prints replies on stdout, so log lines go to stderr and are filtered
hard: the user sees taskpad messages at the chosen level and little else.
Everything (DEBUG and up, all loggers) goes to a size-capped file under the
data directory.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_LOGGER = "taskpad"
LOG_FILE_NAME = "taskpad.log"
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console gate.

    - app loggers pass (the handler level still applies)
    - `quiet` sub-trees (per-read/write chatter) only at WARNING+
    - everything else, py.warnings included, only at ERROR+
    """

    def __init__(self, app: str = APP_LOGGER, quiet: tuple[str, ...] = ("taskpad.storage",)) -> None:
        super().__init__()
        self._app = app
        self._quiet = quiet

    @staticmethod
    def _under(name: str, prefix: str) -> bool:
        return name == prefix or name.startswith(prefix + ".")

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if any(self._under(name, q) for q in self._quiet):
            return record.levelno >= logging.WARNING
        if self._under(name, self._app):
            return True
        return record.levelno >= logging.ERROR


def _console_handler(level: int, fmt: logging.Formatter) -> logging.Handler:
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    return ch


def _file_handler(path: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    fh = RotatingFileHandler(
        str(path),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    fh.setLevel(level)
    fh.setFormatter(fmt)
    return fh


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpad",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the console and file handlers on the root logger; returns the log file path.

    Call once, before the first log line. Calling again replaces the handlers.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    root.addHandler(_console_handler(console_level, fmt))
    root.addHandler(_file_handler(log_file, file_level, fmt))

    # warnings.warn(...) -> 'py.warnings' logger
    logging.captureWarnings(True)
    return log_file
