# permit_intel/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..deps import require_api_key
from ....config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config", dependencies=[Depends(require_api_key)])
def debug_config() -> dict[str, Any]:
    def _redact(v: str | None) -> str | None:
        if not v:
            return v
        if len(v) <= 8:
            return "***"
        return v[:4] + "***" + v[-4:]

    return {
        "ENV": settings.ENV,
        "PERMIT_SOURCE": settings.PERMIT_SOURCE,
        "SHOVELS_BASE_URL": settings.SHOVELS_BASE_URL,
        "SHOVELS_API_KEY": _redact(settings.SHOVELS_API_KEY),
        "ANTHROPIC_API_KEY_SET": bool(settings.ANTHROPIC_API_KEY),
        "LLM_MODEL": settings.LLM_MODEL,
        "DEFAULT_STATE": settings.DEFAULT_STATE,
    }
