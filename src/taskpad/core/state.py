# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..accounts.session import SessionManager
from ..accounts.store import AccountStore
from ..tasks.task_store import TaskStore
from ..ui.auth_flow import AuthFlow
from ..ui.pages import PageTransitionMachine
from .ports import KeyValueStore, PageView


@dataclass
class AppState:
    """
    Application root: one explicitly constructed instance of every service.

    Built by cli.bootstrap.create_initial_state(); tests build their own.
    """

    # Settings or a test stand-in (SimpleNamespace) with the same attributes.
    settings: object

    store: KeyValueStore
    accounts: AccountStore
    session: SessionManager
    tasks: TaskStore
    view: PageView
    pages: PageTransitionMachine
    auth: AuthFlow
