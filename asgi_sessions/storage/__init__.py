from __future__ import annotations

from typing import Any

from ..config import SessionSettings
from .base import SessionStorage, generate_session_id
from .dynamodb import DynamoDBStorage
from .memory import MemoryStorage
from .signed import SignedCookieStorage

__all__ = [
    "SessionStorage",
    "MemoryStorage",
    "SignedCookieStorage",
    "DynamoDBStorage",
    "generate_session_id",
    "lookup_storage",
    "storage_from_settings",
]


def lookup_storage(storage: Any) -> SessionStorage:
    """Resolve a storage specifier to a storage instance.

    Accepts ``None``/``"inmemory"``/``"memory"``, ``"signed-cookie"`` (random
    key) or any object implementing ``SessionStorage``.
    """
    if storage is None or storage in ("inmemory", "memory"):
        return MemoryStorage()
    if storage == "signed-cookie":
        return SignedCookieStorage()
    if isinstance(storage, str) or not isinstance(storage, SessionStorage):
        raise ValueError(
            f"storage must be 'inmemory', 'signed-cookie' or implement SessionStorage, got {storage!r}"
        )
    return storage


def storage_from_settings(s: SessionSettings) -> SessionStorage:
    """Build the storage backend named by ``s.storage``."""
    if s.storage in ("memory", "inmemory"):
        return MemoryStorage()
    if s.storage == "signed-cookie":
        return SignedCookieStorage(
            key=s.secret,
            algorithm=s.algorithm,
            encryption_key=s.encryption_key,
        )
    if s.storage == "dynamodb":
        return DynamoDBStorage(
            table_name=s.dynamodb_table,
            endpoint_url=s.dynamodb_endpoint,
            region_name=s.dynamodb_region,
        )
    raise ValueError(f"Unknown session storage: {s.storage!r}")
