from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .domain.types import (
    ChatTurn,
    ContractorProfile,
    Level,
    MemberPreferences,
    PermitStatus,
)


class _FromDomain(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ----- Inputs -----

class ContractorProfileIn(BaseModel):
    specialties: list[str] = Field(default_factory=list)
    service_areas: list[str] = Field(default_factory=list)
    team_size: int | None = Field(default=None, ge=0)
    certifications: list[str] = Field(default_factory=list)
    past_projects: list[dict] = Field(default_factory=list)

    def to_domain(self) -> ContractorProfile:
        return ContractorProfile(
            specialties=tuple(self.specialties),
            service_areas=tuple(self.service_areas),
            team_size=self.team_size,
            certifications=tuple(self.certifications),
            past_projects=tuple(self.past_projects),
        )


class MemberPreferencesIn(BaseModel):
    min_match_score: float = Field(0.0, ge=0.0, le=1.0)
    service_radius: float | None = None
    preferred_cities: list[str] = Field(default_factory=list)
    excluded_cities: list[str] = Field(default_factory=list)
    preferred_project_types: list[str] = Field(default_factory=list)
    excluded_project_types: list[str] = Field(default_factory=list)
    min_project_value: float | None = Field(default=None, ge=0)
    max_project_value: float | None = Field(default=None, ge=0)

    def to_domain(self) -> MemberPreferences:
        return MemberPreferences(
            min_match_score=self.min_match_score,
            service_radius=self.service_radius,
            preferred_cities=tuple(self.preferred_cities),
            excluded_cities=tuple(self.excluded_cities),
            preferred_project_types=tuple(self.preferred_project_types),
            excluded_project_types=tuple(self.excluded_project_types),
            min_project_value=self.min_project_value,
            max_project_value=self.max_project_value,
        )


class OpportunitySearchIn(BaseModel):
    member_id: str
    profile: ContractorProfileIn
    preferences: MemberPreferencesIn


class ChatTurnIn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatIn(BaseModel):
    message: str = Field(..., min_length=1)
    history: list[ChatTurnIn] = Field(default_factory=list)

    def history_turns(self) -> list[ChatTurn]:
        return [ChatTurn(role=t.role, content=t.content) for t in self.history]


# ----- Outputs -----

class AddressOut(_FromDomain):
    street: str
    city: str
    state: str
    zip: str
    latitude: float | None = None
    longitude: float | None = None


class ContractorOut(_FromDomain):
    name: str
    license_number: str | None = None
    phone: str | None = None


class OwnerOut(_FromDomain):
    name: str
    phone: str | None = None


class PermitOut(_FromDomain):
    id: str
    permit_number: str
    permit_type: str
    status: PermitStatus
    issued_date: date | None = None
    expiration_date: date | None = None
    valuation: float | None = None
    description: str
    address: AddressOut
    contractor: ContractorOut | None = None
    owner: OwnerOut | None = None


class CostRangeOut(_FromDomain):
    low: float
    high: float
    confidence: float


class OpportunityAnalysisOut(_FromDomain):
    opportunity_score: float
    complexity_score: float
    risk_factors: list[str]
    project_complexity: Level
    competition_level: Level
    timeline_estimate_days: int
    key_requirements: list[str]
    recommendations: list[str]
    cost_range_estimate: CostRangeOut | None = None
    is_fallback: bool = False


class EnrichedPermitOut(_FromDomain):
    permit: PermitOut
    analysis: OpportunityAnalysisOut
    analysis_date: datetime


class RankedOpportunityOut(_FromDomain):
    permit_number: str
    score: float
    analysis: OpportunityAnalysisOut


class CostLineOut(_FromDomain):
    category: str
    amount: float
    percentage: float


class CostPhaseOut(_FromDomain):
    name: str
    duration_days: int
    cost: float


class CostEstimateOut(_FromDomain):
    total_estimate: float
    breakdown: list[CostLineOut]
    confidence_level: float
    risk_factors: list[str]
    recommendations: list[str]
    assumptions: list[str]
    phases: list[CostPhaseOut]
    total_duration_days: int


class PermitCostEstimateOut(_FromDomain):
    permit_id: str
    permit_number: str
    estimate: CostEstimateOut
    created_at: datetime


class OpportunityMatchOut(_FromDomain):
    match_score: float
    strengths: list[str]
    challenges: list[str]
    recommendations: list[str]
    conversion_probability: float


class ContractorTallyOut(_FromDomain):
    name: str
    permit_count: int
    total_value: float
    license: str | None = None


class MarketIntelligenceOut(_FromDomain):
    city: str
    state: str
    period: str
    permit_count: int = Field(..., ge=0)
    has_data: bool
    message: str | None = None
    total_value: float = 0.0
    average_value: float = 0.0
    most_common_permit_type: str | None = None
    permit_type_distribution: dict[str, int] = Field(default_factory=dict)
    top_contractors: list[ContractorTallyOut] = Field(default_factory=list)
    market_trends: str | None = None


class ChatOut(BaseModel):
    reply: str
