"""/session: inspect and edit the current session."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ..dependencies import get_session
from ..session import Session

router = APIRouter()


@router.get("/session")
async def read_session(session: Session = Depends(get_session)):
    return {"data": session.read()}


@router.post("/session")
async def update_session(
    changes: dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
):
    session.update(changes)
    return {"data": session.read()}


@router.delete("/session")
async def clear_session(session: Session = Depends(get_session)):
    session.clear()
    return {"success": True}
