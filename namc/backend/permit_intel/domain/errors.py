# permit_intel/domain/errors.py
from __future__ import annotations


class PermitIntelError(Exception):
    """Base for everything the permit pipeline raises on purpose."""


class ConfigurationError(PermitIntelError):
    """A required credential or setting is missing. Raised at construction time."""


class UpstreamError(PermitIntelError):
    """An external dependency (permit source, LLM endpoint) failed."""


class PermitSourceError(UpstreamError):
    pass


class AssistantUnavailableError(UpstreamError):
    pass


class AssistantResponseError(PermitIntelError):
    """The model answered, but not with the JSON shape we asked for."""


class PermitNotFoundError(PermitIntelError):
    def __init__(self, permit_id: str) -> None:
        super().__init__(f"Permit not found: {permit_id}")
        self.permit_id = permit_id
