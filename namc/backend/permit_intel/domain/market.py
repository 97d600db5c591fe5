# permit_intel/domain/market.py
from __future__ import annotations

from collections import Counter

from .types import ContractorTally, MarketIntelligence, Permit

NO_DATA_MESSAGE = "No recent permit data available"
TRENDS_NOTE = "Analysis would require historical data comparison"


def top_contractors(permits: list[Permit], limit: int = 10) -> list[ContractorTally]:
    """
    Contractors of record ranked by permit count.

    Ties keep first-encounter order. The license kept is the first one seen.
    """
    tallies: dict[str, dict] = {}
    for p in permits:
        if p.contractor is None or not p.contractor.name:
            continue
        t = tallies.setdefault(
            p.contractor.name,
            {"count": 0, "value": 0.0, "license": p.contractor.license_number},
        )
        t["count"] += 1
        t["value"] += p.valuation or 0.0

    out = [
        ContractorTally(name=name, permit_count=t["count"], total_value=t["value"], license=t["license"])
        for name, t in tallies.items()
    ]
    out.sort(key=lambda c: c.permit_count, reverse=True)
    return out[:limit]


def summarize_market(
    permits: list[Permit],
    *,
    city: str,
    state: str,
    period: str,
    contractors_limit: int = 10,
) -> MarketIntelligence:
    if not permits:
        return MarketIntelligence(
            city=city,
            state=state,
            period=period,
            permit_count=0,
            has_data=False,
            message=NO_DATA_MESSAGE,
        )

    total = sum(p.valuation or 0.0 for p in permits)

    # Counter keeps insertion order, so most_common() breaks ties by first encounter
    histogram = Counter(p.permit_type for p in permits)
    most_common_type = histogram.most_common(1)[0][0]

    return MarketIntelligence(
        city=city,
        state=state,
        period=period,
        permit_count=len(permits),
        has_data=True,
        total_value=total,
        average_value=total / len(permits),
        most_common_permit_type=most_common_type,
        permit_type_distribution=dict(histogram),
        top_contractors=tuple(top_contractors(permits, contractors_limit)),
        market_trends=TRENDS_NOTE,
    )
