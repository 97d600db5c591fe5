# permit_intel/entrypoints/fastapi_app.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..config import Settings, settings as default_settings
from ..domain.errors import (
    AssistantResponseError,
    AssistantUnavailableError,
    ConfigurationError,
    PermitIntelError,
    PermitNotFoundError,
    PermitSourceError,
)
from ..service_layer.bootstrap import build_permit_service
from ..service_layer.permit_analysis import PermitAnalysisService
from .api.routers import assistant, health, permits

log = logging.getLogger(__name__)

# most specific first; the first isinstance match wins
_ERROR_STATUS: list[tuple[type[PermitIntelError], int, str]] = [
    (PermitNotFoundError, 404, "Permit not found"),
    (AssistantUnavailableError, 503, "AI assistant unavailable"),
    (AssistantResponseError, 502, "AI assistant returned an unreadable response"),
    (PermitSourceError, 502, "Permit data source unavailable"),
    (ConfigurationError, 503, "Service not configured"),
]


def error_response(exc: PermitIntelError) -> JSONResponse:
    for exc_type, status, detail in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return JSONResponse(status_code=status, content={"detail": detail, "error": str(exc)})
    return JSONResponse(status_code=500, content={"detail": "Operation failed", "error": str(exc)})


def create_app(
    settings: Settings | None = None,
    *,
    permit_service: PermitAnalysisService | None = None,
) -> FastAPI:
    """
    Build the app and its services. Missing credentials raise ConfigurationError
    here, before anything is served.
    """
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    service = permit_service or build_permit_service(settings)

    app = FastAPI(title="NAMC Permit Intelligence")
    app.state.permit_service = service

    @app.exception_handler(PermitIntelError)
    async def _permit_intel_error(request: Request, exc: PermitIntelError) -> JSONResponse:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(exc)

    # Routers
    app.include_router(health.router)
    app.include_router(permits.router)
    app.include_router(assistant.router)

    return app
