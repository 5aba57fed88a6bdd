# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and the page-rendering layer swappable and makes testing easier.
"""

from collections.abc import Iterable
from typing import Protocol


class KeyValueStore(Protocol):
    """
    Durable string -> string store shared by every service in the process.

    Implementations raise StorageFailure when the backend cannot be read or written.
    Callers always write whole records (read-modify-write), never partial fields.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
    def keys(self) -> Iterable[str]: ...


class PageView(Protocol):
    """
    Page-rendering side of the transition state machine.

    `page` values are Page enum members (taskpad.ui.pages.Page); kept loose here
    to avoid an import cycle between ports and ui.
    """

    def fade_out(self, page) -> None: ...
    def hide_all(self) -> None: ...
    def show(self, page) -> None: ...
    def clear_form_errors(self, page) -> None: ...
    def reset_form(self, page) -> None: ...
