# src/taskpad/accounts/store.py

from __future__ import annotations

import logging

from ..core.clock import epoch_ms, iso_now
from ..core.errors import DuplicateEmail, InvalidCredentials
from ..core.ports import KeyValueStore
from ..storage.keys import USERS_KEY, AccountId
from ..storage.records import read_json, write_json
from .hashing import demo_hash
from .models import Account, AccountProjection

logger = logging.getLogger(__name__)


class AccountStore:
    """
    Registered accounts, persisted as one JSON list under the `users` key.

    No in-memory cache: every call reads the current record, so a write that
    fails leaves nothing half-applied in memory. Emails are compared exactly
    (no case folding or trimming at this layer).
    """

    def __init__(self, store: KeyValueStore, *, write_retries: int = 1) -> None:
        self._store = store
        self._write_retries = max(0, int(write_retries))

    def list_all(self) -> list[Account]:
        raw = read_json(self._store, USERS_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning("users record is not a list; treating as empty")
            return []

        accounts: list[Account] = []
        for item in raw:
            acc = Account.from_record(item)
            if acc is None:
                logger.warning("Skipping malformed account record")
                continue
            accounts.append(acc)
        return accounts

    def find_by_email(self, email: str) -> Account | None:
        for acc in self.list_all():
            if acc.email == email:
                return acc
        return None

    def register(self, name: str, email: str, password: str) -> AccountProjection:
        accounts = self.list_all()
        if any(a.email == email for a in accounts):
            logger.info("Signup rejected: duplicate email")
            raise DuplicateEmail(email)

        account = Account(
            id=self._new_account_id(accounts),
            name=name,
            email=email,
            password_hash=demo_hash(password),
            created_at=iso_now(),
        )
        accounts.append(account)
        write_json(
            self._store,
            USERS_KEY,
            [a.to_record() for a in accounts],
            retries=self._write_retries,
        )
        logger.info("Account registered id=%s total=%d", account.id, len(accounts))
        return account.projection()

    def authenticate(self, email: str, password: str) -> AccountProjection:
        account = self.find_by_email(email)
        if account is None or account.password_hash != demo_hash(password):
            logger.info("Login rejected")
            raise InvalidCredentials()
        logger.info("Login ok id=%s", account.id)
        return account.projection()

    @staticmethod
    def _new_account_id(existing: list[Account]) -> AccountId:
        # Creation time in ms, bumped past any id already taken.
        taken = {str(a.id) for a in existing}
        candidate = epoch_ms()
        while str(candidate) in taken:
            candidate += 1
        return AccountId(str(candidate))
