# src/taskpad/core/clock.py

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], str]


def iso_now() -> str:
    """UTC now as ISO-8601 with milliseconds and a Z suffix: 2026-01-31T12:00:00.000Z"""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_ms() -> int:
    return time.time_ns() // 1_000_000
