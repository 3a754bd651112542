from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness check used to wake the service on hosted free tiers."""
    return {"status": "awake", "message": "NewsLens backend is running"}
