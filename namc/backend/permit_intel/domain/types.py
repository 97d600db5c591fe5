# permit_intel/domain/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class PermitStatus(str, Enum):
    issued = "issued"
    pending = "pending"
    expired = "expired"
    rejected = "rejected"
    under_review = "under_review"


class Level(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    state: str
    zip: str
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class ContractorOfRecord:
    name: str
    license_number: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class PermitOwner:
    name: str
    phone: str | None = None


@dataclass(frozen=True)
class Permit:
    """A municipal building permit as the permit source reports it. Read-only here."""

    id: str
    permit_number: str
    permit_type: str
    status: PermitStatus
    issued_date: date | None
    description: str
    address: Address
    valuation: float | None = None
    expiration_date: date | None = None
    contractor: ContractorOfRecord | None = None
    owner: PermitOwner | None = None


@dataclass(frozen=True)
class ContractorProfile:
    specialties: tuple[str, ...] = ()
    service_areas: tuple[str, ...] = ()
    team_size: int | None = None
    certifications: tuple[str, ...] = ()
    past_projects: tuple[dict[str, Any], ...] = ()


@dataclass(frozen=True)
class CostRange:
    low: float
    high: float
    confidence: float


@dataclass(frozen=True)
class OpportunityAnalysis:
    opportunity_score: float
    complexity_score: float
    risk_factors: tuple[str, ...]
    project_complexity: Level
    competition_level: Level
    timeline_estimate_days: int
    key_requirements: tuple[str, ...]
    recommendations: tuple[str, ...]
    cost_range_estimate: CostRange | None = None
    is_fallback: bool = False


@dataclass(frozen=True)
class EnrichedPermit:
    permit: Permit
    analysis: OpportunityAnalysis
    analysis_date: datetime


@dataclass(frozen=True)
class RankedOpportunity:
    permit_number: str
    score: float
    analysis: OpportunityAnalysis


@dataclass(frozen=True)
class ProjectEstimateInput:
    description: str
    location: str
    project_type: str
    scope: tuple[str, ...] = ()
    timeline: str | None = None
    special_requirements: tuple[str, ...] = ()


@dataclass(frozen=True)
class CostLine:
    category: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class CostPhase:
    name: str
    duration_days: int
    cost: float


@dataclass(frozen=True)
class CostEstimate:
    total_estimate: float
    breakdown: tuple[CostLine, ...]
    confidence_level: float
    risk_factors: tuple[str, ...]
    recommendations: tuple[str, ...]
    assumptions: tuple[str, ...]
    phases: tuple[CostPhase, ...]
    total_duration_days: int


@dataclass(frozen=True)
class PermitCostEstimate:
    permit_id: str
    permit_number: str
    estimate: CostEstimate
    created_at: datetime


@dataclass(frozen=True)
class OpportunityMatch:
    match_score: float
    strengths: tuple[str, ...]
    challenges: tuple[str, ...]
    recommendations: tuple[str, ...]
    conversion_probability: float


@dataclass(frozen=True)
class ChatTurn:
    role: str  # user|assistant
    content: str


@dataclass(frozen=True)
class ContractorTally:
    name: str
    permit_count: int
    total_value: float
    license: str | None = None


@dataclass(frozen=True)
class MarketIntelligence:
    """
    Aggregate view of a city's recent permits.

    `has_data` is the sentinel callers check; an empty window is not an error.
    """

    city: str
    state: str
    period: str
    permit_count: int
    has_data: bool
    message: str | None = None
    total_value: float = 0.0
    average_value: float = 0.0
    most_common_permit_type: str | None = None
    permit_type_distribution: dict[str, int] = field(default_factory=dict)
    top_contractors: tuple[ContractorTally, ...] = ()
    market_trends: str | None = None


@dataclass(frozen=True)
class PermitSearchParams:
    city: str | None = None
    state: str | None = None
    permit_type: str | None = None
    status: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_valuation: float | None = None
    max_valuation: float | None = None
    limit: int | None = None


@dataclass(frozen=True)
class MemberPreferences:
    min_match_score: float = 0.0
    service_radius: float | None = None
    preferred_cities: tuple[str, ...] = ()
    excluded_cities: tuple[str, ...] = ()
    preferred_project_types: tuple[str, ...] = ()
    excluded_project_types: tuple[str, ...] = ()
    min_project_value: float | None = None
    max_project_value: float | None = None
