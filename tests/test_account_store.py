# tests/test_account_store.py

from __future__ import annotations

import json

import pytest

from taskpad.accounts import store as store_module
from taskpad.accounts.hashing import demo_hash
from taskpad.accounts.store import AccountStore
from taskpad.core.errors import DuplicateEmail, InvalidCredentials, StorageFailure
from taskpad.storage.keys import USERS_KEY
from taskpad.storage.kv_store import MemoryKeyValueStore

from .fakes import FlakyStore


def test_register_then_authenticate(kv) -> None:
    accounts = AccountStore(kv)
    proj = accounts.register("Ann", "ann@x.com", "secret1")
    assert proj.name == "Ann"
    assert proj.email == "ann@x.com"

    again = accounts.authenticate("ann@x.com", "secret1")
    assert again == proj

    stored = json.loads(kv.get(USERS_KEY))
    assert stored[0]["passwordHash"] == demo_hash("secret1")
    assert "secret1" not in kv.get(USERS_KEY)


def test_duplicate_email_rejected(kv) -> None:
    accounts = AccountStore(kv)
    accounts.register("Ann", "ann@x.com", "secret1")

    with pytest.raises(DuplicateEmail):
        accounts.register("Other Ann", "ann@x.com", "different")
    assert len(accounts.list_all()) == 1


def test_wrong_password_and_unknown_email_look_the_same(kv) -> None:
    accounts = AccountStore(kv)
    accounts.register("Ann", "ann@x.com", "secret1")

    with pytest.raises(InvalidCredentials) as wrong_pw:
        accounts.authenticate("ann@x.com", "nope123")
    with pytest.raises(InvalidCredentials) as unknown:
        accounts.authenticate("bob@x.com", "secret1")

    assert type(wrong_pw.value) is type(unknown.value)
    assert str(wrong_pw.value) == str(unknown.value) == "Invalid email or password"


def test_email_match_is_exact(kv) -> None:
    accounts = AccountStore(kv)
    accounts.register("Ann", "ann@x.com", "secret1")

    with pytest.raises(InvalidCredentials):
        accounts.authenticate("Ann@x.com", "secret1")
    # A differently-cased email is a different account.
    accounts.register("Ann 2", "Ann@x.com", "secret1")
    assert len(accounts.list_all()) == 2


def test_malformed_users_record_reads_as_empty() -> None:
    kv = MemoryKeyValueStore({USERS_KEY: "{not json"})
    accounts = AccountStore(kv)
    assert accounts.list_all() == []

    kv.set(USERS_KEY, json.dumps({"not": "a list"}))
    assert accounts.list_all() == []

    kv.set(USERS_KEY, json.dumps([{"id": "1"}, "junk"]))
    assert accounts.list_all() == []


def test_ids_unique_even_with_same_timestamp(kv, monkeypatch) -> None:
    monkeypatch.setattr(store_module, "epoch_ms", lambda: 1_700_000_000_000)
    accounts = AccountStore(kv)
    a = accounts.register("A", "a@x.com", "secret1")
    b = accounts.register("B", "b@x.com", "secret1")
    assert a.id == "1700000000000"
    assert b.id == "1700000000001"


def test_legacy_password_field_still_authenticates() -> None:
    record = [
        {
            "id": "42",
            "name": "Old",
            "email": "old@x.com",
            "password": demo_hash("secret1"),
            "createdAt": "2024-01-01T00:00:00.000Z",
        }
    ]
    accounts = AccountStore(MemoryKeyValueStore({USERS_KEY: json.dumps(record)}))
    assert accounts.authenticate("old@x.com", "secret1").id == "42"


def test_write_is_retried_once() -> None:
    kv = FlakyStore()
    kv.fail_next_writes = 1
    accounts = AccountStore(kv)

    accounts.register("Ann", "ann@x.com", "secret1")
    assert kv.write_attempts == 2
    assert len(accounts.list_all()) == 1


def test_persistent_write_failure_is_reported() -> None:
    kv = FlakyStore()
    kv.fail_keys.add(USERS_KEY)
    accounts = AccountStore(kv)

    with pytest.raises(StorageFailure):
        accounts.register("Ann", "ann@x.com", "secret1")
    assert accounts.list_all() == []


def test_demo_hash_contract() -> None:
    assert demo_hash("") == "0"
    assert demo_hash("a") == "97"
    assert demo_hash("ab") == str(97 * 31 + 98)
    assert demo_hash("secret1") == demo_hash("secret1")
    assert demo_hash("secret1") != demo_hash("secret2")
    # Wraps to a signed 32-bit value.
    assert -(2**31) <= int(demo_hash("x" * 500)) < 2**31
