"""ASGI session middleware.

Reads the session cookie, resolves it through a pluggable storage backend and
attaches a ``Session`` to ``request.state.session``. When the response starts,
the session's final state decides what happens:

- empty: the backend entry is deleted and an expiring cookie is sent;
- modified: the data is written and the cookie is (re)issued with the key the
  backend returned;
- otherwise: nothing, neither storage nor cookie is touched.
"""

from __future__ import annotations

import logging
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .session import Session
from .storage import SessionStorage, lookup_storage

logger = logging.getLogger(__name__)

COOKIE_NAME = "sessionid"


class SessionMiddleware:
    """ASGI middleware for pluggable sessions.

    Args:
        app: The wrapped ASGI application.
        storage: ``"inmemory"`` (default), ``"signed-cookie"`` or any
            ``SessionStorage`` implementation. Validated here, not per request.
    """

    def __init__(
        self,
        app: ASGIApp,
        storage: Any = "inmemory",
        cookie_name: str = COOKIE_NAME,
        cookie_secure: bool = False,
        cookie_http_only: bool = True,
        cookie_domain: str | None = None,
        cookie_path: str = "/",
        cookie_same_site: str | None = "lax",
    ) -> None:
        self.app = app
        self.storage: SessionStorage = lookup_storage(storage)
        self.cookie_name = cookie_name
        self.cookie_secure = cookie_secure
        self.cookie_http_only = cookie_http_only
        self.cookie_domain = cookie_domain
        self.cookie_path = cookie_path
        self.cookie_same_site = cookie_same_site

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        conn = HTTPConnection(scope)
        key = conn.cookies.get(self.cookie_name) or None
        session_id, data = await self.storage.resolve(key)
        session = Session(session_id, data)

        scope["state"] = scope.get("state", {})
        scope["state"]["session"] = session

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                await self._before_send(session, MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, receive, send_wrapper)

    async def _before_send(self, session: Session, headers: MutableHeaders) -> None:
        if session.empty:
            session_id = await self.storage.delete(session.id)
            logger.debug("Session empty, deleted")
            headers.append("set-cookie", self._make_cookie(session_id, delete=True))
        elif session.modified:
            session_id = await self.storage.write(session.id, session.read())
            logger.debug("Session modified, persisted")
            headers.append("set-cookie", self._make_cookie(session_id))

    def _make_cookie(self, value: str, *, delete: bool = False) -> str:
        parts = [
            f"{self.cookie_name}={value}",
            f"Path={self.cookie_path}",
        ]
        if delete:
            parts.append("Max-Age=0")
        if self.cookie_domain:
            parts.append(f"Domain={self.cookie_domain}")
        if self.cookie_http_only:
            parts.append("HttpOnly")
        if self.cookie_same_site:
            parts.append(f"SameSite={self.cookie_same_site}")
        if self.cookie_secure:
            parts.append("Secure")
        return "; ".join(parts)
