# permit_intel/domain/policies.py
from __future__ import annotations

from .types import EnrichedPermit, Level, MemberPreferences, OpportunityAnalysis, Permit


def fallback_analysis() -> OpportunityAnalysis:
    """Placeholder attached when per-permit analysis fails in a batch."""
    return OpportunityAnalysis(
        opportunity_score=0.5,
        complexity_score=0.5,
        risk_factors=("Analysis unavailable",),
        project_complexity=Level.MEDIUM,
        competition_level=Level.MEDIUM,
        timeline_estimate_days=90,
        key_requirements=("Analysis pending",),
        recommendations=("Manual review recommended",),
        cost_range_estimate=None,
        is_fallback=True,
    )


def within_valuation(permit: Permit, min_valuation: float | None, max_valuation: float | None) -> bool:
    """
    Inclusive bounds. With no bound given every permit passes; with any
    bound given a permit that reports no valuation is rejected.
    """
    if min_valuation is None and max_valuation is None:
        return True
    if permit.valuation is None:
        return False
    if min_valuation is not None and permit.valuation < min_valuation:
        return False
    if max_valuation is not None and permit.valuation > max_valuation:
        return False
    return True


def filter_by_valuation(
    permits: list[Permit],
    min_valuation: float | None = None,
    max_valuation: float | None = None,
) -> list[Permit]:
    return [p for p in permits if within_valuation(p, min_valuation, max_valuation)]


def matches_preferences(item: EnrichedPermit, preferences: MemberPreferences) -> bool:
    if item.analysis.opportunity_score < preferences.min_match_score:
        return False

    permit_type = item.permit.permit_type.lower()
    if any(ex.lower() in permit_type for ex in preferences.excluded_project_types):
        return False

    if preferences.preferred_project_types:
        description = item.permit.description.lower()
        return any(
            pref.lower() in permit_type or pref.lower() in description
            for pref in preferences.preferred_project_types
        )

    return True


def cities_to_search(
    preferences: MemberPreferences,
    *,
    default_cities: list[str],
    max_cities: int,
) -> list[str]:
    """
    Preferred cities (or the defaults), truncated first, then minus exclusions.
    An excluded city still consumes one of the slots.
    """
    candidates = list(preferences.preferred_cities) or list(default_cities)
    excluded = set(preferences.excluded_cities)
    return [c for c in candidates[:max_cities] if c not in excluded]
