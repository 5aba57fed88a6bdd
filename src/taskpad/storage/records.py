# src/taskpad/storage/records.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.errors import StorageFailure
from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)


def read_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """
    Read and decode a JSON record.

    Fails open: a missing, unreadable or unparseable record yields `default`.
    """
    try:
        raw = store.get(key)
    except StorageFailure:
        logger.exception("Failed to read record key=%s; using default", key)
        return default

    if raw is None:
        return default

    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Malformed record key=%s; treating as absent", key)
        return default


def write_json(store: KeyValueStore, key: str, value: Any, *, retries: int = 0) -> None:
    """
    Encode and write a whole JSON record.

    StorageFailure propagates after `retries` extra attempts.
    """
    payload = json.dumps(value, ensure_ascii=False)
    attempts = max(0, int(retries)) + 1
    for attempt in range(1, attempts + 1):
        try:
            store.set(key, payload)
            return
        except StorageFailure:
            if attempt >= attempts:
                raise
            logger.warning("Write failed key=%s attempt=%d/%d; retrying", key, attempt, attempts)

