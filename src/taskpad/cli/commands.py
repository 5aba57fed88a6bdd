# src/taskpad/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import os
import shlex
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import cast

from ..connectors.console_view import render_task_list
from ..core.errors import FieldErrors, StorageFailure
from ..core.state import AppState
from ..ui.auth_flow import STORAGE_WARNING, AuthOutcome
from ..ui.pages import Page

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Slash-command registry used by the console connector (/help, /add, ...).

    Arguments are shell-split (quoting allowed) unless the command was
    registered with raw_args=True: those handlers get the rest of the line
    verbatim as one argument, quotes and spacing included.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        raw_args: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
        if raw_args:
            self._raw.update(n.lower() for n in [key, *aliases])

    def _split_args(self, name: str, rest: str) -> list[str]:
        if name in self._raw:
            return [rest] if rest else []
        try:
            return shlex.split(rest)
        except ValueError:
            return rest.split()

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        head = line[1:].split(maxsplit=1)
        if not head:
            return "Empty command. Use /help to list available commands."

        name = head[0].lower()
        args = self._split_args(name, head[1] if len(head) > 1 else "")

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _format_errors(errors: FieldErrors) -> str:
    return "\n".join(f"  {field}: {msg}" for field, msg in errors.items())


def _format_outcome(outcome: AuthOutcome) -> str:
    if outcome.ignored:
        return "Please wait, a request is already in progress."
    if not outcome.ok:
        return "Could not continue:\n" + _format_errors(outcome.errors)
    return outcome.warning or f"Signed in as {outcome.account.email if outcome.account else '?'}."


def _tasks_locked(state: AppState) -> str | None:
    if state.session.is_active or getattr(state.settings, "anonymous_mode", False):
        return None
    return "Sign in first (/login or /signup)."


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


def _after_mutation(state: AppState, note: str = "", warning: str = "") -> str:
    # Every mutation re-renders the whole list.
    parts = [p for p in (note, warning, render_task_list(state.tasks.all())) if p]
    return "\n".join(parts)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    user = state.session.current
    return (
        "Status:\n"
        f"  App: {getattr(state.settings, 'app_name', 'taskpad')}\n"
        f"  Page: {state.pages.current or '-'}\n"
        f"  User: {user.email if user else 'not signed in'}\n"
        f"  Tasks: {state.tasks.count()} (next id {state.tasks.next_id})\n"
        f"  Store: {getattr(state.settings, 'store_backend', 'sqlite')}\n"
        f"  Anonymous mode: {'ON' if getattr(state.settings, 'anonymous_mode', False) else 'OFF'}"
    )


async def cmd_page(state: AppState, args: list[str]) -> str:
    """/page landing|signup|login|dashboard"""
    page = Page.parse(args[0]) if args else None
    if page is None:
        return "Usage: /page landing|signup|login|dashboard"
    if page == Page.DASHBOARD and _tasks_locked(state):
        return "Sign in first (/login or /signup)."
    await state.pages.navigate(page)
    return ""


async def cmd_signup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.session.is_active:
        return f"Already signed in as {state.session.current.email}. Use /logout first."
    if len(args) != 4:
        return 'Usage: /signup <name> <email> <password> <confirm>  (quote names with spaces: "Ann Lee")'
    if emit is not None:
        emit("Creating account...")
    outcome = await state.auth.submit_signup(*args)
    return _format_outcome(outcome)


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.session.is_active:
        return f"Already signed in as {state.session.current.email}. Use /logout first."
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    if emit is not None:
        emit("Signing in...")
    outcome = await state.auth.submit_login(*args)
    return _format_outcome(outcome)


async def cmd_logout(state: AppState, args: list[str]) -> str:
    if not state.session.is_active:
        return "Not signed in."
    warning = await state.auth.logout()
    return warning or "Signed out."


def cmd_whoami(state: AppState, args: list[str]) -> str:
    user = state.session.current
    if user is None:
        return "Not signed in."
    return f"{user.name} <{user.email}> (id {user.id})"


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <text>  (text is taken verbatim)"""
    locked = _tasks_locked(state)
    if locked:
        return locked
    try:
        task = state.tasks.add(args[0] if args else "")
    except StorageFailure:
        logger.exception("add: storage write failed")
        return _after_mutation(state, warning=STORAGE_WARNING)
    return _after_mutation(state, note=f"Added #{task.id}.")


def cmd_list(state: AppState, args: list[str]) -> str:
    locked = _tasks_locked(state)
    if locked:
        return locked
    return render_task_list(state.tasks.all())


def cmd_done(state: AppState, args: list[str]) -> str:
    """Toggle completion: /done <id>"""
    locked = _tasks_locked(state)
    if locked:
        return locked
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /done <id>"
    try:
        task = state.tasks.toggle_complete(task_id)
    except StorageFailure:
        logger.exception("toggle: storage write failed")
        return _after_mutation(state, warning=STORAGE_WARNING)
    if task is None:
        return f"No task #{task_id}."
    return _after_mutation(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <new text>  (text is taken verbatim; completed tasks are read-only)"""
    locked = _tasks_locked(state)
    if locked:
        return locked
    parts = args[0].split(maxsplit=1) if args else []
    task_id = _parse_id(parts[0]) if parts else None
    new_text = parts[1] if len(parts) > 1 else ""
    if task_id is None:
        return "Usage: /edit <id> <new text>"
    current = state.tasks.get(task_id)
    if current is None:
        return f"No task #{task_id}."
    if current.completed:
        return f"Task #{task_id} is completed. Use /done {task_id} to reopen it before editing."
    try:
        task = state.tasks.edit(task_id, new_text)
    except StorageFailure:
        logger.exception("edit: storage write failed")
        return _after_mutation(state, warning=STORAGE_WARNING)
    if task is None:
        return f"No task #{task_id}."
    return _after_mutation(state)


def cmd_rm(state: AppState, args: list[str]) -> str:
    locked = _tasks_locked(state)
    if locked:
        return locked
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /rm <id>"
    try:
        removed = state.tasks.delete(task_id)
    except StorageFailure:
        logger.exception("delete: storage write failed")
        return _after_mutation(state, warning=STORAGE_WARNING)
    if not removed:
        return f"No task #{task_id}."
    return _after_mutation(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    """/clear confirm  -> delete every task"""
    locked = _tasks_locked(state)
    if locked:
        return locked
    if not args or args[0].lower() != "confirm":
        return f"This deletes all {state.tasks.count()} tasks. Type /clear confirm to proceed."
    try:
        removed = state.tasks.clear_all(confirmed=True)
    except StorageFailure:
        logger.exception("clear: storage write failed")
        return _after_mutation(state, warning=STORAGE_WARNING)
    return _after_mutation(state, note=f"Deleted {removed} tasks.")


def cmd_export(state: AppState, args: list[str]) -> str:
    """/export [path]  -> write tasks.json"""
    locked = _tasks_locked(state)
    if locked:
        return locked
    default_path = getattr(state.settings, "export_path", Path("tasks.json"))
    path = Path(args[0]).expanduser() if args else Path(default_path)
    if not path.name or path.is_dir():
        return f"Export failed: {path} is a directory, give a file name."
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(state.tasks.export_snapshot(), "utf-8")
        os.replace(tmp, path)
    except (OSError, ValueError) as e:
        logger.exception("Export to %s failed", path)
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        return f"Export failed: {e}"
    logger.info("Exported %d tasks to %s", state.tasks.count(), path)
    return f"Exported {state.tasks.count()} tasks to {path}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current page, user and store.")
registry.register("page", cmd_page, help_text="Go to a page: /page landing|signup|login.")
registry.register(
    "signup", cmd_signup, help_text="Create an account: /signup <name> <email> <password> <confirm>."
)
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("whoami", cmd_whoami, help_text="Show the signed-in account.")
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", raw_args=True)
registry.register("list", cmd_list, help_text="List tasks, newest first.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register(
    "edit", cmd_edit, help_text="Change task text: /edit <id> <text>.", raw_args=True
)
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("clear", cmd_clear, help_text="Delete all tasks: /clear confirm.")
registry.register("export", cmd_export, help_text="Write tasks as JSON: /export [path].")
