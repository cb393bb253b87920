"""FastAPI dependency injection: session access."""

from __future__ import annotations

from fastapi import Request

from .session import Session


def get_session(request: Request) -> Session:
    """Get the session from request state."""
    return request.state.session
