"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from app.core.config import get_settings

router = APIRouter()


@router.get("/healthz", summary="Liveness probe")
def health_check() -> dict[str, str]:
    settings = get_settings()
    return {"status": "ok", "service": settings.service_name, "environment": settings.environment}
