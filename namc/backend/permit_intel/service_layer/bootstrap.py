# permit_intel/service_layer/bootstrap.py
from __future__ import annotations

from ..adapters.clients.shovels import ShovelsClient
from ..adapters.llm.anthropic_client import AnthropicCompletionClient
from ..adapters.permits.base import PermitSource
from ..adapters.permits.shovels import ShovelsPermitSource
from ..adapters.permits.stub_json import StubJsonPermitSource
from ..config import Settings
from ..domain.errors import ConfigurationError
from .assistant import ConstructionAssistant
from .permit_analysis import PermitAnalysisService


def build_permit_source(settings: Settings) -> PermitSource:
    """
    shovels  -> live API (fails fast without a key)
    stub_json -> local fixtures, dev/test only
    """
    src = (settings.PERMIT_SOURCE or "").strip()

    if src == "shovels":
        return ShovelsPermitSource(ShovelsClient(settings))
    if src == "stub_json":
        if settings.ENV.lower() not in ("dev", "local", "test"):
            raise ConfigurationError("PERMIT_SOURCE=stub_json is only allowed in dev/local/test")
        return StubJsonPermitSource.from_settings(settings)

    raise ConfigurationError(f"Unknown PERMIT_SOURCE={src!r}. Use shovels or stub_json.")


def build_assistant(settings: Settings) -> ConstructionAssistant:
    return ConstructionAssistant(AnthropicCompletionClient(settings), settings=settings)


def build_permit_service(settings: Settings) -> PermitAnalysisService:
    """Construct once at startup. Missing credentials raise here, never mid-request."""
    return PermitAnalysisService(
        build_permit_source(settings),
        build_assistant(settings),
        settings=settings,
    )
