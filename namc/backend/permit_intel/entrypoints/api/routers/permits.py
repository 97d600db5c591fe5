# permit_intel/entrypoints/api/routers/permits.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel, Field

from ..deps import get_permit_service, require_api_key
from ....domain.types import PermitSearchParams
from ....schemas import (
    ContractorProfileIn,
    EnrichedPermitOut,
    MarketIntelligenceOut,
    OpportunityMatchOut,
    OpportunitySearchIn,
    PermitCostEstimateOut,
    PermitOut,
    RankedOpportunityOut,
)
from ....service_layer.permit_analysis import PermitAnalysisService

router = APIRouter(tags=["permits"], dependencies=[Depends(require_api_key)])


class PermitSearchIn(BaseModel):
    city: str | None = None
    state: str | None = None
    permit_type: str | None = None
    status: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_valuation: float | None = Field(default=None, ge=0)
    max_valuation: float | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=1, le=200)
    profile: ContractorProfileIn | None = None

    def params(self) -> PermitSearchParams:
        return PermitSearchParams(
            city=self.city,
            state=self.state,
            permit_type=self.permit_type,
            status=self.status,
            date_from=self.date_from,
            date_to=self.date_to,
            min_valuation=self.min_valuation,
            max_valuation=self.max_valuation,
            limit=self.limit,
        )


class RankIn(BaseModel):
    permit_ids: list[str] = Field(..., min_length=1, max_length=25)
    profile: ContractorProfileIn


@router.get("/permits/search", response_model=list[PermitOut])
async def search_permits(
    city: str | None = Query(None),
    state: str | None = Query(None, min_length=2, max_length=2),
    permit_type: str | None = Query(None),
    status: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    min_valuation: float | None = Query(None, ge=0),
    max_valuation: float | None = Query(None, ge=0),
    limit: int | None = Query(None, ge=1, le=200),
    service: PermitAnalysisService = Depends(get_permit_service),
) -> list[PermitOut]:
    permits = await service.search_permits(
        PermitSearchParams(
            city=city,
            state=state,
            permit_type=permit_type,
            status=status,
            date_from=date_from,
            date_to=date_to,
            min_valuation=min_valuation,
            max_valuation=max_valuation,
            limit=limit,
        )
    )
    return [PermitOut.model_validate(p) for p in permits]


@router.get("/permits/by-contractor", response_model=list[PermitOut])
async def permits_by_contractor(
    name: str = Query(..., min_length=1),
    limit: int | None = Query(None, ge=1, le=500),
    service: PermitAnalysisService = Depends(get_permit_service),
) -> list[PermitOut]:
    permits = await service.permits_by_contractor(name, limit)
    return [PermitOut.model_validate(p) for p in permits]


@router.post("/permits/search/analysis", response_model=list[EnrichedPermitOut])
async def search_permits_with_analysis(
    body: PermitSearchIn,
    service: PermitAnalysisService = Depends(get_permit_service),
) -> list[EnrichedPermitOut]:
    profile = body.profile.to_domain() if body.profile else None
    enriched = await service.search_permits(body.params(), include_ai_analysis=True, profile=profile)
    return [EnrichedPermitOut.model_validate(e) for e in enriched]


@router.post("/permits/{permit_id}/analysis", response_model=EnrichedPermitOut)
async def analyze_permit(
    permit_id: str,
    profile: ContractorProfileIn | None = Body(default=None),
    service: PermitAnalysisService = Depends(get_permit_service),
) -> EnrichedPermitOut:
    enriched = await service.analyze_specific_permit(permit_id, profile.to_domain() if profile else None)
    return EnrichedPermitOut.model_validate(enriched)


@router.post("/permits/{permit_id}/cost-estimate", response_model=PermitCostEstimateOut)
async def estimate_permit_cost(
    permit_id: str,
    profile: ContractorProfileIn | None = Body(default=None),
    service: PermitAnalysisService = Depends(get_permit_service),
) -> PermitCostEstimateOut:
    permit = await service.get_permit(permit_id)
    est = await service.estimate_permit_cost(permit, profile.to_domain() if profile else None)
    return PermitCostEstimateOut.model_validate(est)


@router.post("/permits/{permit_id}/match", response_model=OpportunityMatchOut)
async def match_permit(
    permit_id: str,
    profile: ContractorProfileIn,
    service: PermitAnalysisService = Depends(get_permit_service),
) -> OpportunityMatchOut:
    match = await service.match_permit(permit_id, profile.to_domain())
    return OpportunityMatchOut.model_validate(match)


@router.post("/opportunities/search", response_model=list[EnrichedPermitOut])
async def find_opportunities(
    body: OpportunitySearchIn,
    service: PermitAnalysisService = Depends(get_permit_service),
) -> list[EnrichedPermitOut]:
    found = await service.find_opportunities(body.member_id, body.profile.to_domain(), body.preferences.to_domain())
    return [EnrichedPermitOut.model_validate(e) for e in found]


@router.post("/opportunities/rank", response_model=list[RankedOpportunityOut])
async def rank_opportunities(
    body: RankIn,
    service: PermitAnalysisService = Depends(get_permit_service),
) -> list[RankedOpportunityOut]:
    permits = [await service.get_permit(pid) for pid in body.permit_ids]
    ranked = await service.rank_opportunities(permits, body.profile.to_domain())
    return [RankedOpportunityOut.model_validate(r) for r in ranked]


@router.get("/market", response_model=MarketIntelligenceOut)
async def market_intelligence(
    city: str = Query(..., min_length=1),
    state: str | None = Query(None, min_length=2, max_length=2),
    service: PermitAnalysisService = Depends(get_permit_service),
) -> MarketIntelligenceOut:
    mi = await service.get_market_intelligence(city, state)
    return MarketIntelligenceOut.model_validate(mi)
