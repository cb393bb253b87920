"""Session storage protocol."""

from __future__ import annotations

import secrets
from typing import Any, Protocol, runtime_checkable

SESSION_ID_BYTES = 48


def generate_session_id() -> str:
    """Random, URL-safe session identifier (base64url, no padding)."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


@runtime_checkable
class SessionStorage(Protocol):
    """Protocol for pluggable session persistence."""

    async def resolve(self, key: str | None) -> tuple[str, dict[str, Any]]:
        """Resolve ``key`` to ``(key, data)``.

        Missing, unknown or unverifiable keys resolve to a fresh key and
        empty data. Must not raise for those cases.
        """
        ...

    async def write(self, key: str, data: dict[str, Any]) -> str:
        """Store ``data`` and return the key the client should hold."""
        ...

    async def delete(self, key: str) -> str:
        """Remove the session, if present. Returns the key."""
        ...
