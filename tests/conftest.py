# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.cli.bootstrap import create_initial_state
from taskpad.core.state import AppState
from taskpad.storage.kv_store import SQLiteKeyValueStore

from .fakes import FakePageView


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the console commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic (no delays, tmp paths).
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        store_path=tmp_path / "store.sqlite3",
        store_backend="sqlite",
        export_path=tmp_path / "tasks.json",
        anonymous_mode=False,
        loading_seconds=0.0,
        signup_delay_seconds=0.0,
        login_delay_seconds=0.0,
        redirect_delay_seconds=0.0,
        fade_seconds=0.0,
    )


@pytest.fixture()
def kv(settings: SimpleNamespace) -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(settings.store_path)


@pytest.fixture()
def view() -> FakePageView:
    return FakePageView()


@pytest.fixture()
def state(settings: SimpleNamespace, kv: SQLiteKeyValueStore, view: FakePageView) -> AppState:
    """
    AppState wired with a recording view.

    NOTE: We keep the real SQLite store here because persistence across
    service instances is part of what we want to test.
    """
    return create_initial_state(settings=settings, store=kv, view_factory=lambda _s, _t: view)
