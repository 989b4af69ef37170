from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from festival import __version__

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "version": __version__, "timestamp": datetime.now(timezone.utc).isoformat()}
