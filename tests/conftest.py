"""Shared fixtures for the session test suite."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from asgi_sessions import MemoryStorage, SessionMiddleware, SignedCookieStorage
from asgi_sessions.config import SessionSettings, override_settings
from asgi_sessions.main import create_app


# ── Session test app ──────────────────────────────────────────────────────

def _build_session_app(storage: Any, **options: Any) -> FastAPI:
    """Minimal app exercising the middleware in isolation."""
    app = FastAPI()

    @app.get("/untouched")
    async def untouched():
        return {"ok": True}

    @app.get("/set")
    async def set_foo(request: Request):
        request.state.session["foo"] = 2
        return {"ok": True}

    @app.get("/incr")
    async def incr_foo(request: Request):
        request.state.session.swap(lambda d: {**d, "foo": d["foo"] + 1})
        return {"ok": True}

    @app.get("/read")
    async def read(request: Request):
        return request.state.session.read()

    @app.get("/remove")
    def remove_foo(request: Request):
        # sync endpoint: runs in the threadpool
        del request.state.session["foo"]
        return {"ok": True}

    @app.get("/cart/init")
    async def init_cart(request: Request):
        request.state.session["cart"] = []
        return {"ok": True}

    @app.get("/cart/peek")
    async def peek_cart(request: Request):
        cart = request.state.session.get("cart")
        cart.append("item")
        return {"cart": cart}

    app.add_middleware(SessionMiddleware, storage=storage, **options)
    return app


@pytest.fixture
def make_session_app():
    """Factory for the minimal session app: ``make_session_app(storage, **options)``."""
    return _build_session_app


# ── Cookie helpers ────────────────────────────────────────────────────────

@pytest.fixture
def find_set_cookie():
    """Factory returning the raw Set-Cookie header for a cookie name, if any."""

    def _find(resp, name: str = "sessionid") -> str | None:
        for header in resp.headers.get_list("set-cookie"):
            if header.startswith(f"{name}="):
                return header
        return None

    return _find


@pytest.fixture
def cookie_value():
    """Extract the value from a raw Set-Cookie header."""

    def _value(header: str) -> str:
        return header.split(";", 1)[0].split("=", 1)[1]

    return _value


@pytest.fixture(scope="session")
def signing_secret() -> str:
    return "test-secret-key-for-signed-sessions-0123456789"


# ── Storage and clients ───────────────────────────────────────────────────

@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def signed_storage(signing_secret) -> SignedCookieStorage:
    return SignedCookieStorage(key=signing_secret)


@pytest.fixture
def session_client(memory_storage) -> TestClient:
    return TestClient(_build_session_app(memory_storage), cookies={})


@pytest.fixture
def signed_client(signed_storage) -> TestClient:
    return TestClient(_build_session_app(signed_storage), cookies={})


# ── Application factory ───────────────────────────────────────────────────

@pytest.fixture
def test_settings() -> SessionSettings:
    return SessionSettings(storage="memory", cookie_name="sessionid")


@pytest.fixture
def app(test_settings, memory_storage):
    override_settings(test_settings)
    yield create_app(storage=memory_storage)
    override_settings(None)


@pytest.fixture
def client(app) -> TestClient:
    """TestClient with cookie persistence."""
    return TestClient(app, cookies={})
