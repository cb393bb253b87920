"""GET /health: liveness check."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    return {
        "status": "ok",
        "storage": type(request.app.state.session_storage).__name__,
    }
