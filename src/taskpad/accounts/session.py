# src/taskpad/accounts/session.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import StorageFailure
from ..core.ports import KeyValueStore
from ..storage.keys import CURRENT_USER_KEY
from ..storage.records import read_json, write_json
from .models import AccountProjection

logger = logging.getLogger(__name__)

SessionListener = Callable[[AccountProjection | None], None]


class SessionManager:
    """
    Holds the single active identity (or none) and mirrors it to `currentUser`.

    Listeners are called on every identity change, before the record is
    written, so dependents (the task store) re-bind even if persisting fails.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._current: AccountProjection | None = None
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> AccountProjection | None:
        return self._current

    @property
    def is_active(self) -> bool:
        return self._current is not None

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _set(self, projection: AccountProjection | None) -> None:
        changed = projection != self._current
        self._current = projection
        if not changed:
            return
        for listener in list(self._listeners):
            listener(projection)

    def _drop_record(self) -> None:
        try:
            self._store.remove(CURRENT_USER_KEY)
        except StorageFailure:
            logger.exception("Failed to drop stale session record")

    def restore(self) -> AccountProjection | None:
        # read_json yields None for absent and unparseable records alike.
        raw = read_json(self._store, CURRENT_USER_KEY, default=None)
        projection = AccountProjection.from_record(raw)
        if projection is None:
            if raw is not None:
                logger.warning("Persisted session is malformed; starting logged out")
            self._drop_record()
            self._set(None)
            return None

        self._set(projection)
        logger.info("Session restored id=%s", projection.id)
        return projection

    def establish(self, projection: AccountProjection) -> None:
        if self._current is not None and self._current.id != projection.id:
            logger.info("Replacing active session id=%s -> id=%s", self._current.id, projection.id)
        self._set(projection)
        write_json(self._store, CURRENT_USER_KEY, projection.to_record())
        logger.info("Session established id=%s", projection.id)

    def clear(self) -> None:
        previous = self._current
        self._set(None)
        self._store.remove(CURRENT_USER_KEY)
        if previous is not None:
            logger.info("Session cleared id=%s", previous.id)
