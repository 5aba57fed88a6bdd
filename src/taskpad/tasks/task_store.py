# src/taskpad/tasks/task_store.py

from __future__ import annotations

import json
import logging
from dataclasses import replace

from ..accounts.models import AccountProjection
from ..accounts.validation import validate_task_text
from ..core.clock import Clock, iso_now
from ..core.errors import EmptyText
from ..core.ports import KeyValueStore
from ..storage.keys import AccountId, counter_key, tasks_key
from ..storage.records import read_json, write_json
from .task_models import Task

logger = logging.getLogger(__name__)


def parse_snapshot(text: str) -> list[Task]:
    """Decode an export_snapshot() document; malformed entries are skipped."""
    raw = json.loads(text)
    if not isinstance(raw, list):
        raise ValueError("snapshot must be a JSON list")
    return [t for t in (Task.from_record(item) for item in raw) if t is not None]


class TaskStore:
    """
    Ordered task collection of one owner, newest first.

    Storage layout (see storage.keys):
    - tasks_key(owner): the whole collection, rewritten on every mutation
    - counter_key(owner): the next id to issue, written before the collection

    Owner `None` is the anonymous mode that uses the legacy unscoped keys.
    Ids are never reused: on load the next id is at least 1 + the largest
    stored id, even if the counter record is missing or stale.

    Failed reads fall back to an empty collection; failed writes raise
    StorageFailure after the in-memory change has been applied.
    """

    def __init__(self, store: KeyValueStore, *, clock: Clock = iso_now) -> None:
        self._store = store
        self._clock = clock
        self._owner: AccountId | None = None
        self._tasks: list[Task] = []
        self._next_id = 1
        self._load()

    # ---- binding ----

    @property
    def owner(self) -> AccountId | None:
        return self._owner

    def bind(self, account: AccountProjection | None) -> None:
        """Switch to another owner; the previous in-memory collection is discarded."""
        self._owner = None if account is None else account.id
        self._tasks = []
        self._next_id = 1
        self._load()
        logger.info(
            "TaskStore bound owner=%s tasks=%d next_id=%d",
            self._owner,
            len(self._tasks),
            self._next_id,
        )

    # ---- low-level helpers ----

    def _load(self) -> None:
        raw = read_json(self._store, tasks_key(self._owner), default=[])
        if not isinstance(raw, list):
            logger.warning("Task collection for owner=%s is not a list; starting empty", self._owner)
            raw = []

        tasks: list[Task] = []
        seen: set[int] = set()
        for item in raw:
            task = Task.from_record(item)
            if task is None or task.id in seen:
                logger.warning("Skipping malformed task record owner=%s", self._owner)
                continue
            seen.add(task.id)
            tasks.append(task)
        self._tasks = tasks

        counter = read_json(self._store, counter_key(self._owner), default=1)
        if isinstance(counter, bool) or not isinstance(counter, int) or counter < 1:
            logger.warning("Task id counter for owner=%s is malformed; rebuilding", self._owner)
            counter = 1
        self._next_id = max(counter, max(seen, default=0) + 1)

    def _save_counter(self) -> None:
        write_json(self._store, counter_key(self._owner), self._next_id)

    def _save_tasks(self) -> None:
        write_json(self._store, tasks_key(self._owner), [t.to_record() for t in self._tasks])

    def _find(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- public API ----

    @property
    def next_id(self) -> int:
        return self._next_id

    def count(self) -> int:
        return len(self._tasks)

    def all(self) -> list[Task]:
        return [replace(t) for t in self._tasks]

    def get(self, task_id: int) -> Task | None:
        t = self._find(task_id)
        return None if t is None else replace(t)

    def add(self, text: str) -> Task:
        errors = validate_task_text(text)
        if errors:
            raise EmptyText(errors["text"])

        task_id = self._next_id
        self._next_id += 1
        now = self._clock()
        task = Task(id=task_id, text=text.strip(), completed=False, created_at=now, updated_at=now)
        self._tasks.insert(0, task)

        self._save_counter()
        self._save_tasks()
        logger.debug("Task added owner=%s id=%s", self._owner, task_id)
        return replace(task)

    def toggle_complete(self, task_id: int) -> Task | None:
        task = self._find(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        task.updated_at = self._clock()
        self._save_tasks()
        logger.debug("Task toggled owner=%s id=%s completed=%s", self._owner, task_id, task.completed)
        return replace(task)

    def edit(self, task_id: int, new_text: str) -> Task | None:
        errors = validate_task_text(new_text)
        if errors:
            raise EmptyText(errors["text"])

        task = self._find(task_id)
        if task is None:
            return None

        new_text = new_text.strip()
        if task.text == new_text:
            return replace(task)

        task.text = new_text
        task.updated_at = self._clock()
        self._save_tasks()
        logger.debug("Task edited owner=%s id=%s", self._owner, task_id)
        return replace(task)

    def delete(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        if len(self._tasks) == before:
            return False
        self._save_tasks()
        logger.debug("Task deleted owner=%s id=%s", self._owner, task_id)
        return True

    def clear_all(self, *, confirmed: bool = False) -> int:
        """Delete every task of the owner. Callers must pass confirmed=True."""
        if not confirmed:
            raise ValueError("clear_all requires explicit confirmation")
        removed = len(self._tasks)
        self._tasks = []
        self._save_tasks()
        logger.info("Cleared %d tasks owner=%s", removed, self._owner)
        return removed

    def export_snapshot(self) -> str:
        return json.dumps([t.to_record() for t in self._tasks], ensure_ascii=False, indent=2)
