# permit_intel/service_layer/assistant.py
from __future__ import annotations

import logging
from typing import Sequence

from ..adapters.llm.base import CompletionClient
from ..config import Settings
from ..domain import prompts
from ..domain.json_extract import extract_first_json_object
from ..domain.parsing import analysis_from_payload, cost_estimate_from_payload, match_from_payload
from ..domain.ranking import sort_ranked
from ..domain.types import (
    ChatTurn,
    ContractorProfile,
    CostEstimate,
    OpportunityAnalysis,
    OpportunityMatch,
    Permit,
    ProjectEstimateInput,
    RankedOpportunity,
)
from .rate_limit import Clock, IntervalLimiter, SystemClock

log = logging.getLogger(__name__)


class ConstructionAssistant:
    """
    Prompt in, validated dataclass out.

    Every structured call follows the same pattern: render a template, make one
    completion call, pull the first JSON object out of the reply, validate it.
    No retries and no fallbacks here; callers decide.
    """

    def __init__(self, completion: CompletionClient, *, settings: Settings, clock: Clock | None = None) -> None:
        self.completion = completion
        self.settings = settings
        self.clock = clock or SystemClock()

    async def analyze_permit(self, permit: Permit, profile: ContractorProfile | None = None) -> OpportunityAnalysis:
        reply = await self.completion.complete(
            prompts.permit_analysis_prompt(permit, profile),
            max_tokens=self.settings.LLM_MAX_TOKENS_ANALYSIS,
        )
        return analysis_from_payload(extract_first_json_object(reply))

    async def estimate_project_cost(
        self,
        project: ProjectEstimateInput,
        profile: ContractorProfile | None = None,
    ) -> CostEstimate:
        reply = await self.completion.complete(
            prompts.cost_estimate_prompt(project, profile),
            max_tokens=self.settings.LLM_MAX_TOKENS_COST,
        )
        return cost_estimate_from_payload(extract_first_json_object(reply))

    async def match_opportunity(self, permit: Permit, profile: ContractorProfile) -> OpportunityMatch:
        reply = await self.completion.complete(
            prompts.opportunity_match_prompt(permit, profile),
            max_tokens=self.settings.LLM_MAX_TOKENS_MATCH,
        )
        return match_from_payload(extract_first_json_object(reply))

    async def chat(self, message: str, history: Sequence[ChatTurn] = ()) -> str:
        return await self.completion.complete(
            message,
            max_tokens=self.settings.LLM_MAX_TOKENS_CHAT,
            system=prompts.CHAT_SYSTEM_PROMPT,
            history=history,
        )

    async def rank_opportunities(
        self,
        permits: Sequence[Permit],
        profile: ContractorProfile,
    ) -> list[RankedOpportunity]:
        """
        Analyze each permit in order and rank by opportunity score.

        A permit whose analysis fails is logged and left out. This differs from
        PermitAnalysisService.search_permits, which substitutes a fallback.
        """
        limiter = IntervalLimiter(self.settings.LLM_CALL_INTERVAL_S, clock=self.clock)
        results: list[RankedOpportunity] = []

        for permit in permits:
            await limiter.acquire()
            try:
                analysis = await self.analyze_permit(permit, profile)
            except Exception as e:
                log.warning("dropping permit %s from ranking: %s", permit.permit_number, e)
                continue
            results.append(
                RankedOpportunity(
                    permit_number=permit.permit_number,
                    score=analysis.opportunity_score,
                    analysis=analysis,
                )
            )

        return sort_ranked(results)
