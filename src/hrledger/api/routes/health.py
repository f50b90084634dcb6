"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    if getattr(request.app.state, "persistence", None) is None:
        return {"status": "starting"}
    return {"status": "ready", "backend": request.app.state.settings.backend}
