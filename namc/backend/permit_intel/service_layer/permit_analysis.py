# permit_intel/service_layer/permit_analysis.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Sequence

from ..adapters.permits.base import PermitQuery, PermitSource
from ..config import Settings
from ..domain.errors import PermitIntelError, PermitNotFoundError, PermitSourceError
from ..domain.market import summarize_market
from ..domain.policies import cities_to_search, fallback_analysis, filter_by_valuation, matches_preferences
from ..domain.prompts import permit_to_project
from ..domain.ranking import sort_by_opportunity
from ..domain.types import (
    ContractorProfile,
    EnrichedPermit,
    MarketIntelligence,
    MemberPreferences,
    OpportunityMatch,
    Permit,
    PermitCostEstimate,
    PermitSearchParams,
    RankedOpportunity,
)
from .assistant import ConstructionAssistant
from .rate_limit import Clock, IntervalLimiter, SystemClock

log = logging.getLogger(__name__)


class PermitAnalysisService:
    """
    Permit search + AI enrichment + local aggregation.

    Failure policy differs by granularity:
      - batch enrichment (search_permits with AI) degrades a failed permit to a
        labeled fallback analysis and never drops it
      - single-item calls (analyze_specific_permit, estimate_permit_cost) let
        assistant errors reach the caller
    Each call is independent; nothing is cached between calls.
    """

    def __init__(
        self,
        source: PermitSource,
        assistant: ConstructionAssistant,
        *,
        settings: Settings,
        clock: Clock | None = None,
    ) -> None:
        self.source = source
        self.assistant = assistant
        self.settings = settings
        self.clock = clock or SystemClock()

    # -------------------------
    # Fetch
    # -------------------------

    async def _fetch(self, query: PermitQuery) -> list[Permit]:
        try:
            return await self.source.search(query)
        except PermitIntelError:
            raise
        except Exception as e:
            log.exception("permit source search failed for city=%s state=%s", query.city, query.state)
            raise PermitSourceError("Failed to search permits") from e

    async def get_permit(self, permit_id: str) -> Permit:
        try:
            permit = await self.source.get_by_id(permit_id)
        except PermitIntelError:
            raise
        except Exception as e:
            log.exception("permit source lookup failed for id=%s", permit_id)
            raise PermitSourceError("Failed to fetch permit") from e
        if permit is None:
            raise PermitNotFoundError(permit_id)
        return permit

    async def permits_by_contractor(self, contractor_name: str, limit: int | None = None) -> list[Permit]:
        limit = limit or self.settings.CONTRACTOR_SEARCH_LIMIT
        try:
            return await self.source.by_contractor(contractor_name, limit=limit)
        except PermitIntelError:
            raise
        except Exception as e:
            log.exception("permit source contractor lookup failed for %s", contractor_name)
            raise PermitSourceError("Failed to fetch contractor permits") from e

    # -------------------------
    # Enrichment
    # -------------------------

    async def _enrich_with_fallback(
        self,
        permits: Sequence[Permit],
        profile: ContractorProfile | None,
    ) -> list[EnrichedPermit]:
        limiter = IntervalLimiter(self.settings.LLM_CALL_INTERVAL_S, clock=self.clock)
        out: list[EnrichedPermit] = []

        for permit in permits:
            await limiter.acquire()
            try:
                analysis = await self.assistant.analyze_permit(permit, profile)
            except Exception as e:
                log.warning("analysis failed for permit %s, using fallback: %s", permit.permit_number, e)
                analysis = fallback_analysis()
            out.append(EnrichedPermit(permit=permit, analysis=analysis, analysis_date=self.clock.now()))

        return out

    async def search_permits(
        self,
        params: PermitSearchParams,
        include_ai_analysis: bool = False,
        profile: ContractorProfile | None = None,
    ) -> list[Permit] | list[EnrichedPermit]:
        query = PermitQuery(
            city=params.city,
            state=params.state or self.settings.DEFAULT_STATE,
            permit_type=params.permit_type,
            status=params.status,
            date_from=params.date_from,
            date_to=params.date_to,
            limit=params.limit or self.settings.DEFAULT_SEARCH_LIMIT,
        )
        permits = await self._fetch(query)
        permits = filter_by_valuation(permits, params.min_valuation, params.max_valuation)

        if not include_ai_analysis:
            return permits

        capped = permits[: self.settings.AI_ANALYSIS_CAP]
        return await self._enrich_with_fallback(capped, profile)

    async def analyze_specific_permit(
        self,
        permit_id: str,
        profile: ContractorProfile | None = None,
    ) -> EnrichedPermit:
        permit = await self.get_permit(permit_id)
        analysis = await self.assistant.analyze_permit(permit, profile)
        return EnrichedPermit(permit=permit, analysis=analysis, analysis_date=self.clock.now())

    async def find_opportunities(
        self,
        member_id: str,
        profile: ContractorProfile,
        preferences: MemberPreferences,
    ) -> list[EnrichedPermit]:
        cities = cities_to_search(
            preferences,
            default_cities=self.settings.DEFAULT_CITIES,
            max_cities=self.settings.MAX_CITIES_PER_SEARCH,
        )
        log.info("finding opportunities for member=%s cities=%s", member_id, cities)

        limiter = IntervalLimiter(self.settings.CITY_SEARCH_INTERVAL_S, clock=self.clock)
        found: list[EnrichedPermit] = []

        for city in cities:
            await limiter.acquire()
            enriched = await self.search_permits(
                PermitSearchParams(
                    city=city,
                    state=self.settings.DEFAULT_STATE,
                    limit=self.settings.OPPORTUNITY_SEARCH_LIMIT,
                    min_valuation=preferences.min_project_value,
                    max_valuation=preferences.max_project_value,
                ),
                include_ai_analysis=True,
                profile=profile,
            )
            found.extend(e for e in enriched if matches_preferences(e, preferences))

        return sort_by_opportunity(found)

    async def estimate_permit_cost(
        self,
        permit: Permit,
        profile: ContractorProfile | None = None,
    ) -> PermitCostEstimate:
        estimate = await self.assistant.estimate_project_cost(permit_to_project(permit), profile)
        return PermitCostEstimate(
            permit_id=permit.id,
            permit_number=permit.permit_number,
            estimate=estimate,
            created_at=self.clock.now(),
        )

    async def match_permit(self, permit_id: str, profile: ContractorProfile) -> OpportunityMatch:
        permit = await self.get_permit(permit_id)
        return await self.assistant.match_opportunity(permit, profile)

    async def rank_opportunities(
        self,
        permits: Sequence[Permit],
        profile: ContractorProfile,
    ) -> list[RankedOpportunity]:
        return await self.assistant.rank_opportunities(permits, profile)

    # -------------------------
    # Market intelligence (no AI)
    # -------------------------

    async def get_market_intelligence(self, city: str, state: str | None = None) -> MarketIntelligence:
        state = state or self.settings.DEFAULT_STATE
        days = self.settings.MARKET_WINDOW_DAYS
        date_from = self.clock.now().date() - timedelta(days=days)

        permits = await self.search_permits(
            PermitSearchParams(city=city, state=state, date_from=date_from, limit=self.settings.MARKET_SEARCH_LIMIT)
        )
        return summarize_market(
            permits,
            city=city,
            state=state,
            period=f"Last {days} days",
            contractors_limit=self.settings.TOP_CONTRACTORS_LIMIT,
        )
