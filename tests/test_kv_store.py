# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskpad.core.errors import StorageFailure
from taskpad.storage.keys import AccountId, counter_key, tasks_key
from taskpad.storage.kv_store import MemoryKeyValueStore, SQLiteKeyValueStore
from taskpad.storage.records import read_json, write_json

from .fakes import FlakyStore


def test_sqlite_set_get_remove_and_reopen(tmp_path: Path) -> None:
    db = tmp_path / "store.sqlite3"
    kv = SQLiteKeyValueStore(db)

    assert kv.get("users") is None
    kv.set("users", "[]")
    kv.set("users", '[{"id": "1"}]')
    kv.set("currentUser", "{}")
    assert kv.get("users") == '[{"id": "1"}]'
    assert list(kv.keys()) == ["currentUser", "users"]

    reopened = SQLiteKeyValueStore(db)
    assert reopened.get("users") == '[{"id": "1"}]'

    reopened.remove("currentUser")
    reopened.remove("currentUser")  # absent key: no error
    assert kv.get("currentUser") is None


def test_sqlite_open_failure_is_storage_failure(tmp_path: Path) -> None:
    # A directory is not a database file.
    with pytest.raises(StorageFailure):
        SQLiteKeyValueStore(tmp_path)


def test_read_json_fails_open() -> None:
    kv = MemoryKeyValueStore({"bad": "{nope", "good": "[1, 2]"})
    assert read_json(kv, "good") == [1, 2]
    assert read_json(kv, "bad", default=[]) == []
    assert read_json(kv, "missing", default=0) == 0

    flaky = FlakyStore()
    flaky.fail_reads = True
    assert read_json(flaky, "good", default="fallback") == "fallback"


def test_write_json_retries_then_raises() -> None:
    kv = FlakyStore()
    kv.fail_next_writes = 1
    write_json(kv, "k", {"a": 1}, retries=1)
    assert read_json(kv, "k") == {"a": 1}

    kv.fail_next_writes = 2
    with pytest.raises(StorageFailure):
        write_json(kv, "k", {"a": 2}, retries=1)
    assert read_json(kv, "k") == {"a": 1}


def test_scoped_keys() -> None:
    ann = AccountId("1700000000000")
    assert tasks_key(ann) == "todoTasks_1700000000000"
    assert counter_key(ann) == "taskIdCounter_1700000000000"
    assert tasks_key(None) == "todoTasks"
    assert counter_key(None) == "taskIdCounter"
    with pytest.raises(ValueError):
        tasks_key(AccountId("  "))
