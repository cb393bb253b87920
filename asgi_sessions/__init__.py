"""Pluggable cookie sessions for ASGI applications."""

from .middleware import SessionMiddleware
from .session import Session
from .storage import (
    DynamoDBStorage,
    MemoryStorage,
    SessionStorage,
    SignedCookieStorage,
    lookup_storage,
)

__all__ = [
    "Session",
    "SessionMiddleware",
    "SessionStorage",
    "MemoryStorage",
    "SignedCookieStorage",
    "DynamoDBStorage",
    "lookup_storage",
]
