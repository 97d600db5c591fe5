# tests/conftest.py
from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from typing import Any, Sequence

import pytest

from permit_intel.config import Settings
from permit_intel.domain.types import (
    Address,
    ChatTurn,
    ContractorOfRecord,
    ContractorProfile,
    Permit,
    PermitStatus,
)
from permit_intel.service_layer.assistant import ConstructionAssistant
from permit_intel.service_layer.permit_analysis import PermitAnalysisService


class ManualClock:
    """Fake time: sleep() advances the clock instead of waiting."""

    def __init__(self, start: datetime | None = None) -> None:
        self.start = start or datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)
        self.t = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.t

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.t)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.t += seconds

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeCompletion:
    """
    Scripted completion client. Each reply is a string, an exception to raise,
    or a callable(prompt) -> str.
    """

    def __init__(self, replies: Sequence[Any] = (), default: Any = None) -> None:
        self.replies = list(replies)
        self.default = default
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        system: str | None = None,
        history: Sequence[ChatTurn] = (),
    ) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "system": system, "history": list(history)})
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


class FakeSource:
    def __init__(
        self,
        permits: list[Permit] | None = None,
        by_city: dict[str, list[Permit]] | None = None,
        clock: ManualClock | None = None,
    ) -> None:
        self.permits = permits or []
        self.by_city = by_city
        self.clock = clock
        self.queries: list[Any] = []
        self.query_times: list[float] = []
        self.contractor_lookups: list[tuple[str, int]] = []
        self.error: Exception | None = None

    async def search(self, query):
        self.queries.append(query)
        if self.clock is not None:
            self.query_times.append(self.clock.monotonic())
        if self.error:
            raise self.error
        if self.by_city is not None:
            return list(self.by_city.get(query.city or "", []))
        return list(self.permits)

    async def get_by_id(self, permit_id: str):
        if self.error:
            raise self.error
        for p in self.permits:
            if p.id == permit_id:
                return p
        return None

    async def by_contractor(self, contractor_name: str, *, limit: int = 100):
        self.contractor_lookups.append((contractor_name, limit))
        if self.error:
            raise self.error
        return [p for p in self.permits if p.contractor and p.contractor.name == contractor_name][:limit]


def analysis_reply(score: float = 0.8, **overrides: Any) -> str:
    data = {
        "opportunityScore": score,
        "complexityScore": 0.4,
        "riskFactors": ["Tight schedule"],
        "projectComplexity": "MEDIUM",
        "competitionLevel": "HIGH",
        "timelineEstimate": 120,
        "keyRequirements": ["Framing", "Structural engineering"],
        "recommendations": ["Contact the owner early"],
        "costRangeEstimate": {"low": 150000, "high": 210000, "confidence": 0.7},
    }
    data.update(overrides)
    return "Here is my analysis:\n" + json.dumps(data) + "\nLet me know if you need more."


def make_permit(
    pid: str = "p-1",
    *,
    valuation: float | None = 100000.0,
    permit_type: str = "Residential Addition",
    description: str = "Second-story addition",
    city: str = "Oakland",
    contractor: str | None = None,
    license_number: str | None = None,
    issued: date | None = date(2025, 9, 1),
) -> Permit:
    return Permit(
        id=pid,
        permit_number=f"PN-{pid}",
        permit_type=permit_type,
        status=PermitStatus.issued,
        issued_date=issued,
        description=description,
        address=Address(street="1 Main St", city=city, state="CA", zip="94612"),
        valuation=valuation,
        contractor=ContractorOfRecord(name=contractor, license_number=license_number) if contractor else None,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ANTHROPIC_API_KEY="test-anthropic-key",
        SHOVELS_API_KEY="test-shovels-key",
        SHOVELS_BASE_URL="https://shovels.test/v1",
        HTTP_BACKOFF_BASE_S=0.0,
        ENV="test",
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def profile() -> ContractorProfile:
    return ContractorProfile(
        specialties=("Residential remodeling", "Additions"),
        service_areas=("Oakland", "Berkeley"),
        team_size=12,
        certifications=("CSLB B", "SBE"),
    )


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion(default=analysis_reply())


@pytest.fixture
def assistant(completion, settings, clock) -> ConstructionAssistant:
    return ConstructionAssistant(completion, settings=settings, clock=clock)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def service(source, assistant, settings, clock) -> PermitAnalysisService:
    return PermitAnalysisService(source, assistant, settings=settings, clock=clock)
