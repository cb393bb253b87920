"""Per-request session object.

A ``Session`` wraps the data resolved by the storage backend and tracks two
flags the middleware uses when the response starts:

- ``accessed``: the data was read or written during this request.
- ``modified``: the data was written during this request.

Both flags only ever go from ``False`` to ``True``. Handlers may run in the
event loop or in Starlette's threadpool, so flags and the data reference are
guarded by a lock. The data dict is never mutated in place: every write
installs a new dict, and reads hand out deep copies, so nothing a handler
holds aliases the stored data.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Iterator

_MISSING = object()


class Session:
    """Mutable key/value session bound to one request."""

    def __init__(self, session_id: str, data: dict[str, Any] | None = None) -> None:
        self._id = session_id
        self._data: dict[str, Any] = copy.deepcopy(dict(data)) if data else {}
        self._accessed = False
        self._modified = False
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"Session(id={self._id!r}, accessed={self._accessed}, "
            f"modified={self._modified}, size={len(self._data)})"
        )

    # ── Identity and flags (never mark the session as accessed) ──────────

    @property
    def id(self) -> str:
        return self._id

    @property
    def empty(self) -> bool:
        with self._lock:
            return len(self._data) == 0

    @property
    def accessed(self) -> bool:
        with self._lock:
            return self._accessed

    @property
    def modified(self) -> bool:
        with self._lock:
            return self._modified

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    # ── Reads ────────────────────────────────────────────────────────────

    def _deref(self) -> dict[str, Any]:
        with self._lock:
            self._accessed = True
            return self._data

    def read(self) -> dict[str, Any]:
        """Return a deep copy of the current data."""
        return copy.deepcopy(self._deref())

    def __getitem__(self, key: str) -> Any:
        return copy.deepcopy(self._deref()[key])

    def get(self, key: str, default: Any = None) -> Any:
        data = self._deref()
        if key not in data:
            return default
        return copy.deepcopy(data[key])

    def __contains__(self, key: object) -> bool:
        return key in self._deref()

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._deref()))

    def keys(self) -> list[str]:
        return list(self._deref().keys())

    def items(self) -> list[tuple[str, Any]]:
        return list(copy.deepcopy(self._deref()).items())

    # ── Writes ───────────────────────────────────────────────────────────

    def _touch(self) -> None:
        with self._lock:
            self._accessed = True
            self._modified = True

    def swap(self, fn: Callable[..., dict[str, Any]], *args: Any, **kwargs: Any) -> dict[str, Any]:
        """Atomically replace the data with ``fn(data, *args, **kwargs)``.

        ``fn`` receives a copy of the current data and must return the new
        mapping. It runs without the lock held, so it may read the session;
        if another write lands first, ``fn`` is called again on the newer
        data. Returns the new data.
        """
        self._touch()
        while True:
            with self._lock:
                current = self._data
            new = copy.deepcopy(dict(fn(copy.deepcopy(current), *args, **kwargs)))
            with self._lock:
                if self._data is current:
                    self._data = new
                    return copy.deepcopy(new)

    def reset(self, new_data: dict[str, Any]) -> dict[str, Any]:
        new = copy.deepcopy(dict(new_data))
        with self._lock:
            self._accessed = True
            self._modified = True
            self._data = new
        return copy.deepcopy(new)

    def compare_and_set(self, expected: dict[str, Any], new_data: dict[str, Any]) -> bool:
        """Set the data to ``new_data`` only if it currently equals ``expected``."""
        new = copy.deepcopy(dict(new_data))
        with self._lock:
            self._accessed = True
            self._modified = True
            if self._data != expected:
                return False
            self._data = new
            return True

    def __setitem__(self, key: str, value: Any) -> None:
        self.swap(_assoc, key, value)

    def __delitem__(self, key: str) -> None:
        with self._lock:
            self._accessed = True
            self._modified = True
            if key not in self._data:
                raise KeyError(key)
            new = dict(self._data)
            del new[key]
            self._data = new

    def pop(self, key: str, default: Any = _MISSING) -> Any:
        with self._lock:
            self._accessed = True
            self._modified = True
            if key not in self._data:
                if default is _MISSING:
                    raise KeyError(key)
                return default
            new = dict(self._data)
            value = new.pop(key)
            self._data = new
            return value

    def setdefault(self, key: str, default: Any = None) -> Any:
        with self._lock:
            self._accessed = True
            self._modified = True
            if key not in self._data:
                self._data = {**self._data, key: copy.deepcopy(default)}
            return copy.deepcopy(self._data[key])

    def update(self, *args: Any, **kwargs: Any) -> None:
        changes = dict(*args, **kwargs)
        self.swap(lambda data: {**data, **changes})

    def clear(self) -> None:
        self.reset({})


def _assoc(data: dict[str, Any], key: str, value: Any) -> dict[str, Any]:
    data[key] = value
    return data
