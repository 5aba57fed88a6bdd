# src/taskpad/storage/keys.py

"""
Record keys in the key-value store.

All per-account scoping goes through tasks_key()/counter_key() so the read
and write sites can never disagree on the naming rule. `None` stands for the
anonymous (not signed in) owner, which keeps the legacy unscoped keys.
"""

from __future__ import annotations

from typing import NewType

AccountId = NewType("AccountId", str)

USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"

_TASKS_PREFIX = "todoTasks"
_COUNTER_PREFIX = "taskIdCounter"


def _scoped(prefix: str, owner: AccountId | None) -> str:
    if owner is None:
        return prefix
    owner_s = str(owner).strip()
    if not owner_s:
        raise ValueError("account id must not be empty")
    return f"{prefix}_{owner_s}"


def tasks_key(owner: AccountId | None) -> str:
    return _scoped(_TASKS_PREFIX, owner)


def counter_key(owner: AccountId | None) -> str:
    return _scoped(_COUNTER_PREFIX, owner)
