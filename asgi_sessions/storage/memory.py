"""In-process session storage."""

from __future__ import annotations

import copy
import threading
from typing import Any

from .base import generate_session_id


class MemoryStorage:
    """Volatile session storage for a single process.

    Sessions are lost on restart and not shared across processes. The map is
    replaced copy-on-write, so readers never see a partially applied update,
    and session data is deep-copied in and out so callers never alias it.
    Entries are only removed when their session becomes empty.
    """

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._store)

    async def resolve(self, key: str | None) -> tuple[str, dict[str, Any]]:
        if key is None:
            return generate_session_id(), {}
        data = self._store.get(key)
        if data is None:
            return generate_session_id(), {}
        return key, copy.deepcopy(data)

    async def write(self, key: str, data: dict[str, Any]) -> str:
        with self._lock:
            self._store = {**self._store, key: copy.deepcopy(data)}
        return key

    async def delete(self, key: str) -> str:
        with self._lock:
            if key in self._store:
                store = dict(self._store)
                del store[key]
                self._store = store
        return key
