import json

import pytest
from conftest import FakeCompletion, analysis_reply, make_permit

from permit_intel.domain.errors import AssistantResponseError, AssistantUnavailableError
from permit_intel.domain.prompts import CHAT_SYSTEM_PROMPT
from permit_intel.domain.types import ChatTurn, Level, ProjectEstimateInput
from permit_intel.service_layer.assistant import ConstructionAssistant


async def test_analyze_permit_prompt_and_result(assistant, completion, profile):
    permit = make_permit(valuation=1234567, contractor="Bay Builders")
    a = await assistant.analyze_permit(permit, profile)

    assert a.opportunity_score == 0.8
    assert a.competition_level == Level.HIGH
    assert a.cost_range_estimate.low == 150000.0

    call = completion.calls[0]
    assert call["max_tokens"] == 2000
    assert "Permit Number: PN-p-1" in call["prompt"]
    assert "Valuation: $1,234,567" in call["prompt"]
    assert "Contractor: Bay Builders" in call["prompt"]
    assert "Owner: Not specified" in call["prompt"]
    assert "Specialties: Residential remodeling, Additions" in call["prompt"]
    assert "Certifications: CSLB B, SBE" in call["prompt"]


async def test_analyze_permit_without_profile_omits_profile_block(assistant, completion):
    await assistant.analyze_permit(make_permit(valuation=None))
    prompt = completion.calls[0]["prompt"]
    assert "CONTRACTOR PROFILE" not in prompt
    assert "Valuation: Not specified" in prompt


async def test_unparseable_reply_raises(settings, clock):
    a = ConstructionAssistant(FakeCompletion(default="Sorry, I can't help."), settings=settings, clock=clock)
    with pytest.raises(AssistantResponseError):
        await a.analyze_permit(make_permit())


async def test_transport_error_propagates(settings, clock):
    a = ConstructionAssistant(FakeCompletion(default=AssistantUnavailableError("down")), settings=settings, clock=clock)
    with pytest.raises(AssistantUnavailableError):
        await a.analyze_permit(make_permit())


async def test_cost_estimate_uses_larger_budget(settings, clock, profile):
    reply = json.dumps({"totalEstimate": 250000, "confidenceLevel": 0.5, "timeline": {"phases": [], "totalDuration": 60}})
    completion = FakeCompletion(default=reply)
    a = ConstructionAssistant(completion, settings=settings, clock=clock)

    est = await a.estimate_project_cost(
        ProjectEstimateInput(description="Kitchen remodel", location="Oakland, CA", project_type="Remodel"),
        profile,
    )
    assert est.total_estimate == 250000.0
    assert est.total_duration_days == 60
    assert completion.calls[0]["max_tokens"] == 3000
    assert "Special Requirements: None specified" in completion.calls[0]["prompt"]
    # cost prompt carries no certifications line
    assert "Certifications" not in completion.calls[0]["prompt"]


async def test_match_opportunity(settings, clock, profile):
    completion = FakeCompletion(default='{"matchScore": 0.65, "conversionProbability": 0.3}')
    a = ConstructionAssistant(completion, settings=settings, clock=clock)
    m = await a.match_opportunity(make_permit(), profile)
    assert m.match_score == 0.65
    assert "Team Size: 12" in completion.calls[0]["prompt"]


async def test_chat_passes_system_prompt_and_history(settings, clock):
    completion = FakeCompletion(default="Pull a permit before you start framing.")
    a = ConstructionAssistant(completion, settings=settings, clock=clock)
    history = [ChatTurn(role="user", content="hi"), ChatTurn(role="assistant", content="hello")]

    reply = await a.chat("Do I need a permit?", history)

    assert reply == "Pull a permit before you start framing."
    call = completion.calls[0]
    assert call["system"] == CHAT_SYSTEM_PROMPT
    assert call["history"] == history
    assert call["prompt"] == "Do I need a permit?"


async def test_rank_drops_failures_and_sorts(settings, clock, profile):
    completion = FakeCompletion(
        replies=[
            analysis_reply(0.3),
            AssistantUnavailableError("boom"),
            analysis_reply(0.9),
            "no json here",
            analysis_reply(0.3),
        ]
    )
    a = ConstructionAssistant(completion, settings=settings, clock=clock)
    permits = [make_permit(str(i)) for i in range(5)]

    ranked = await a.rank_opportunities(permits, profile)

    assert [r.permit_number for r in ranked] == ["PN-2", "PN-0", "PN-4"]
    scores = [r.score for r in ranked]
    assert all(x >= y for x, y in zip(scores, scores[1:]))
    # one call per permit, spaced one second apart
    assert len(completion.calls) == 5
    assert clock.sleeps == [1.0] * 4
