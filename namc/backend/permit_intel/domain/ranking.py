# permit_intel/domain/ranking.py
from __future__ import annotations

from .types import EnrichedPermit, RankedOpportunity


def sort_by_opportunity(items: list[EnrichedPermit]) -> list[EnrichedPermit]:
    # sorted() is stable; equal scores keep input order
    return sorted(items, key=lambda e: e.analysis.opportunity_score, reverse=True)


def sort_ranked(items: list[RankedOpportunity]) -> list[RankedOpportunity]:
    return sorted(items, key=lambda r: r.score, reverse=True)


def explain(item: EnrichedPermit) -> str:
    """Short human-readable line for logs and exports."""
    a = item.analysis
    tag = " | fallback" if a.is_fallback else ""
    return (
        f"{item.permit.permit_number} opportunity={a.opportunity_score:.2f} "
        f"complexity={a.project_complexity.value} competition={a.competition_level.value} "
        f"timeline={a.timeline_estimate_days}d{tag}"
    )
