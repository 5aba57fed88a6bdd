# tests/test_session.py

from __future__ import annotations

import json

import pytest

from taskpad.accounts.models import AccountProjection
from taskpad.accounts.session import SessionManager
from taskpad.core.errors import StorageFailure
from taskpad.storage.keys import CURRENT_USER_KEY, AccountId
from taskpad.storage.kv_store import MemoryKeyValueStore

from .fakes import FlakyStore

ANN = AccountProjection(id=AccountId("1"), name="Ann", email="ann@x.com")
BOB = AccountProjection(id=AccountId("2"), name="Bob", email="bob@x.com")


def test_restore_without_record_is_logged_out(kv) -> None:
    session = SessionManager(kv)
    assert session.restore() is None
    assert not session.is_active


def test_establish_survives_reload(kv) -> None:
    SessionManager(kv).establish(ANN)

    reloaded = SessionManager(kv)
    assert reloaded.restore() == ANN
    assert reloaded.current == ANN
    assert json.loads(kv.get(CURRENT_USER_KEY)) == {"id": "1", "name": "Ann", "email": "ann@x.com"}


@pytest.mark.parametrize("raw", ["{oops", json.dumps({"id": 5}), json.dumps(["Ann"])])
def test_malformed_session_fails_open(raw: str) -> None:
    kv = MemoryKeyValueStore({CURRENT_USER_KEY: raw})
    session = SessionManager(kv)

    assert session.restore() is None
    assert session.current is None
    assert kv.get(CURRENT_USER_KEY) is None


def test_clear_removes_persisted_projection(kv) -> None:
    session = SessionManager(kv)
    session.establish(ANN)
    session.clear()

    assert session.current is None
    assert kv.get(CURRENT_USER_KEY) is None
    assert SessionManager(kv).restore() is None


def test_establish_replaces_and_notifies(kv) -> None:
    session = SessionManager(kv)
    seen: list[AccountProjection | None] = []
    session.add_listener(seen.append)

    session.establish(ANN)
    session.establish(ANN)  # same identity: no second notification
    session.establish(BOB)
    session.clear()

    assert seen == [ANN, BOB, None]
    assert session.current is None


def test_write_failure_keeps_in_memory_session() -> None:
    kv = FlakyStore()
    kv.fail_keys.add(CURRENT_USER_KEY)
    session = SessionManager(kv)

    with pytest.raises(StorageFailure):
        session.establish(ANN)
    assert session.current == ANN
