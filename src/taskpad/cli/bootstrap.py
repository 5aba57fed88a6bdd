# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/accounts/session/tasks/pages),
- runs the startup sequence (loading screen, session restore, first page).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..accounts.session import SessionManager
from ..accounts.store import AccountStore
from ..config import get_settings
from ..connectors.console_view import ConsolePageView
from ..core.ports import KeyValueStore, PageView
from ..core.state import AppState
from ..storage.kv_store import MemoryKeyValueStore, SQLiteKeyValueStore
from ..tasks.task_store import TaskStore
from ..ui.auth_flow import AuthFlow
from ..ui.pages import PageTransitionMachine, initial_page

logger = logging.getLogger(__name__)

ViewFactory = Callable[[SessionManager, TaskStore], PageView]


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def build_store(settings) -> KeyValueStore:
    backend = str(getattr(settings, "store_backend", "sqlite"))
    if backend == "memory":
        logger.warning("Using in-memory store: nothing will survive a restart.")
        return MemoryKeyValueStore()
    return SQLiteKeyValueStore(settings.store_path)


def create_initial_state(
    *,
    settings=None,
    store: KeyValueStore | None = None,
    view_factory: ViewFactory | None = None,
    notify: Callable[[str], None] | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if store is None:
        _ensure_local_dirs(settings)
        store = build_store(settings)

    accounts = AccountStore(store)
    session = SessionManager(store)
    tasks = TaskStore(store)
    # Identity changes always re-bind the task store to the new owner.
    session.add_listener(tasks.bind)

    if view_factory is None:
        view: PageView = ConsolePageView(session, tasks)
    else:
        view = view_factory(session, tasks)

    pages = PageTransitionMachine(view, fade_seconds=settings.fade_seconds)
    auth = AuthFlow(
        accounts,
        session,
        pages,
        signup_delay=settings.signup_delay_seconds,
        login_delay=settings.login_delay_seconds,
        redirect_delay=settings.redirect_delay_seconds,
        notify=notify,
    )

    return AppState(
        settings=settings,
        store=store,
        accounts=accounts,
        session=session,
        tasks=tasks,
        view=view,
        pages=pages,
        auth=auth,
    )


async def start_app(state: AppState, *, emit: Callable[[str], None] | None = None) -> None:
    """Loading screen, then restore the session and show the first page."""
    loading = float(getattr(state.settings, "loading_seconds", 0.0) or 0.0)
    if loading > 0:
        if emit is not None:
            emit("Loading...")
        await asyncio.sleep(loading)

    restored = state.session.restore()
    await state.pages.navigate(initial_page(restored))
    logger.info("Started on page=%s user=%s", state.pages.current, restored.id if restored else None)
