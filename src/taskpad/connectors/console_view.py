# src/taskpad/connectors/console_view.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..accounts.session import SessionManager
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from ..ui.pages import Page

logger = logging.getLogger(__name__)

Printer = Callable[[str], None]

_PAGE_HINTS: dict[Page, str] = {
    Page.LANDING: "Organize your day. /signup to create an account, /login if you have one.",
    Page.SIGNUP: "Create account: /signup <name> <email> <password> <confirm>",
    Page.LOGIN: "Sign in: /login <email> <password>",
    Page.DASHBOARD: "Type a task (or /add <text>). /done <id>, /edit <id> <text>, /rm <id>.",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def render_task_list(tasks: Iterable[Task]) -> str:
    tasks = list(tasks)
    if not tasks:
        return "No tasks yet. Add one with /add <text>."
    lines = []
    for t in tasks:
        mark = "x" if t.completed else " "
        lines.append(f"  [{mark}] #{t.id}  {t.text}")
    return "\n".join(lines)


class ConsolePageView:
    """
    PageView for the terminal: a page "shows" by printing its header and hint.

    The dashboard also greets the signed-in user and renders the full list.
    """

    def __init__(
        self,
        session: SessionManager,
        tasks: TaskStore,
        *,
        out: Printer = print,
    ) -> None:
        self._session = session
        self._tasks = tasks
        self._out = out
        self.visible: Page | None = None

    def fade_out(self, page) -> None:
        logger.debug("fade out %s", page)

    def hide_all(self) -> None:
        self.visible = None

    def clear_form_errors(self, page) -> None:
        logger.debug("clear form errors %s", page)

    def reset_form(self, page) -> None:
        logger.debug("reset form %s", page)

    def show(self, page) -> None:
        self.visible = page
        self._out(f"[{_ts_local()}] ==== {str(page).upper()} ====")
        if page == Page.DASHBOARD:
            user = self._session.current
            if user is not None:
                self._out(f"Welcome, {user.name}")
            self._out(render_task_list(self._tasks.all()))
        self._out(_PAGE_HINTS.get(page, ""))
