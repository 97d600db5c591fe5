# scripts/smoke_permit_search.py
from __future__ import annotations

import argparse
import asyncio

from permit_intel.config import settings
from permit_intel.domain.ranking import explain
from permit_intel.domain.types import PermitSearchParams
from permit_intel.service_layer.bootstrap import build_permit_service


async def main() -> None:
    ap = argparse.ArgumentParser(description="Search permits and optionally run AI analysis on the first few.")
    ap.add_argument("--city", default="Oakland")
    ap.add_argument("--state", default=None)
    ap.add_argument("--min-valuation", type=float, default=None)
    ap.add_argument("--max-valuation", type=float, default=None)
    ap.add_argument("--limit", type=int, default=10)
    ap.add_argument("--ai", action="store_true", help="enrich with AI analysis (costs tokens)")
    ap.add_argument("--market", action="store_true", help="print 90-day market intelligence instead")
    args = ap.parse_args()

    service = build_permit_service(settings)

    if args.market:
        mi = await service.get_market_intelligence(args.city, args.state)
        print(mi.city, mi.state, mi.period, "permits:", mi.permit_count)
        if not mi.has_data:
            print(mi.message)
            return
        print("avg value:", round(mi.average_value, 2), "most common:", mi.most_common_permit_type)
        for c in mi.top_contractors:
            print(" ", c.permit_count, c.name, c.license or "")
        return

    params = PermitSearchParams(
        city=args.city,
        state=args.state,
        min_valuation=args.min_valuation,
        max_valuation=args.max_valuation,
        limit=args.limit,
    )
    rows = await service.search_permits(params, include_ai_analysis=args.ai)
    for r in rows:
        if args.ai:
            print(explain(r))
        else:
            print(r.permit_number, r.permit_type, r.valuation, r.address.city)


if __name__ == "__main__":
    asyncio.run(main())
