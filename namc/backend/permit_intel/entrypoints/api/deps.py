# permit_intel/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from ...config import settings
from ...service_layer.assistant import ConstructionAssistant
from ...service_layer.permit_analysis import PermitAnalysisService


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


def get_permit_service(request: Request) -> PermitAnalysisService:
    # Built once in create_app(); tests may swap it via app.dependency_overrides
    return request.app.state.permit_service


def get_assistant(service: PermitAnalysisService = Depends(get_permit_service)) -> ConstructionAssistant:
    return service.assistant
