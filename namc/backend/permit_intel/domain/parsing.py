# permit_intel/domain/parsing.py
from __future__ import annotations

import math
from datetime import date
from typing import Any

from .errors import AssistantResponseError
from .types import (
    Address,
    ContractorOfRecord,
    CostEstimate,
    CostLine,
    CostPhase,
    CostRange,
    Level,
    OpportunityAnalysis,
    OpportunityMatch,
    Permit,
    PermitOwner,
    PermitStatus,
)


def to_int(x: Any) -> int | None:
    if x is None or x == "":
        return None
    try:
        return int(float(x))
    except Exception:
        return None


def to_float(x: Any) -> float | None:
    """NaN and infinities count as missing."""
    if x is None or x == "":
        return None
    try:
        v = float(x)
    except Exception:
        return None
    return v if math.isfinite(v) else None


def to_str(x: Any) -> str | None:
    if x is None:
        return None
    s = str(x).strip()
    return s if s else None


def to_date(x: Any) -> date | None:
    if isinstance(x, date):
        return x
    s = to_str(x)
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None


def get_nested(payload: dict[str, Any], path: str) -> Any:
    """Tiny dot-path getter: 'address.city' or 'contractor.name'."""
    cur: Any = payload
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
        if cur is None:
            return None
    return cur


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _str_list(x: Any) -> tuple[str, ...]:
    if not isinstance(x, list):
        return ()
    return tuple(str(i).strip() for i in x if i is not None and str(i).strip())


# -------------------------
# Permit payloads
# -------------------------

def normalize_status(raw: Any) -> PermitStatus:
    s = (to_str(raw) or "").lower().replace(" ", "_").replace("-", "_")
    try:
        return PermitStatus(s)
    except ValueError:
        return PermitStatus.pending


def permit_from_payload(it: dict[str, Any]) -> Permit:
    """
    Canonicalize a permit-source record into a Permit.

    Accepts the nested v1 shape (address/contractor/owner objects) as well as
    flat keys (city, state, zip_code, job_value...) some endpoints return.
    Raises ValueError when the record has no usable id.
    """
    if not isinstance(it, dict):
        raise ValueError("permit payload must be an object")

    permit_id = to_str(get_first(it, "id", "permit_id"))
    if not permit_id:
        raise ValueError("permit payload has no id")

    raw_addr = it.get("address")
    addr = raw_addr if isinstance(raw_addr, dict) else {}
    flat_street = raw_addr if isinstance(raw_addr, str) else it.get("street")
    address = Address(
        street=to_str(get_first(addr, "street", "street_address")) or to_str(flat_street) or "",
        city=to_str(addr.get("city")) or to_str(it.get("city")) or "",
        state=to_str(addr.get("state")) or to_str(it.get("state")) or "",
        zip=to_str(get_first(addr, "zip", "zip_code")) or to_str(get_first(it, "zip", "zip_code")) or "",
        latitude=to_float(get_first(addr, "latitude", "lat")) if addr else to_float(it.get("latitude")),
        longitude=to_float(get_first(addr, "longitude", "lng", "lon")) if addr else to_float(it.get("longitude")),
    )

    contractor = None
    contractor_name = to_str(get_nested(it, "contractor.name")) or to_str(it.get("contractor_name"))
    if contractor_name:
        contractor = ContractorOfRecord(
            name=contractor_name,
            license_number=to_str(get_nested(it, "contractor.license_number")),
            phone=to_str(get_nested(it, "contractor.phone")),
        )

    owner = None
    owner_name = to_str(get_nested(it, "owner.name")) or to_str(it.get("owner_name"))
    if owner_name:
        owner = PermitOwner(name=owner_name, phone=to_str(get_nested(it, "owner.phone")))

    valuation = to_float(get_first(it, "valuation", "job_value"))

    return Permit(
        id=permit_id,
        permit_number=to_str(get_first(it, "permit_number", "number")) or permit_id,
        permit_type=to_str(get_first(it, "permit_type", "type")) or "",
        status=normalize_status(it.get("status")),
        issued_date=to_date(get_first(it, "issued_date", "issue_date")),
        expiration_date=to_date(get_first(it, "expiration_date", "expiry_date")),
        # a zero valuation means "not reported" upstream
        valuation=valuation if valuation else None,
        description=to_str(it.get("description")) or "",
        address=address,
        contractor=contractor,
        owner=owner,
    )


# -------------------------
# Model replies
# -------------------------

def _required_float(data: dict[str, Any], key: str) -> float:
    v = to_float(data.get(key))
    if v is None:
        raise AssistantResponseError(f"Assistant response missing numeric field: {key}")
    return v


def _level(data: dict[str, Any], key: str) -> Level:
    raw = (to_str(data.get(key)) or "").upper()
    try:
        return Level(raw)
    except ValueError:
        raise AssistantResponseError(f"Assistant response has invalid {key}: {data.get(key)!r}") from None


def _cost_range(raw: Any) -> CostRange | None:
    if not isinstance(raw, dict):
        return None
    low = to_float(raw.get("low"))
    high = to_float(raw.get("high"))
    if low is None or high is None:
        return None
    if low > high:
        low, high = high, low
    confidence = to_float(raw.get("confidence"))
    return CostRange(low=low, high=high, confidence=clamp01(confidence if confidence is not None else 0.0))


def analysis_from_payload(data: dict[str, Any]) -> OpportunityAnalysis:
    timeline = to_int(data.get("timelineEstimate"))
    if timeline is None:
        raise AssistantResponseError("Assistant response missing numeric field: timelineEstimate")

    return OpportunityAnalysis(
        opportunity_score=clamp01(_required_float(data, "opportunityScore")),
        complexity_score=clamp01(_required_float(data, "complexityScore")),
        risk_factors=_str_list(data.get("riskFactors")),
        project_complexity=_level(data, "projectComplexity"),
        competition_level=_level(data, "competitionLevel"),
        timeline_estimate_days=max(0, timeline),
        key_requirements=_str_list(data.get("keyRequirements")),
        recommendations=_str_list(data.get("recommendations")),
        cost_range_estimate=_cost_range(data.get("costRangeEstimate")),
    )


def cost_estimate_from_payload(data: dict[str, Any]) -> CostEstimate:
    breakdown: list[CostLine] = []
    for row in data.get("breakdown") or []:
        if not isinstance(row, dict):
            continue
        breakdown.append(
            CostLine(
                category=to_str(row.get("category")) or "Other",
                amount=to_float(row.get("amount")) or 0.0,
                percentage=to_float(row.get("percentage")) or 0.0,
            )
        )

    timeline = data.get("timeline") if isinstance(data.get("timeline"), dict) else {}
    phases: list[CostPhase] = []
    for row in timeline.get("phases") or []:
        if not isinstance(row, dict):
            continue
        phases.append(
            CostPhase(
                name=to_str(row.get("name")) or "Phase",
                duration_days=max(0, to_int(row.get("duration")) or 0),
                cost=to_float(row.get("cost")) or 0.0,
            )
        )

    total_duration = to_int(timeline.get("totalDuration"))
    if total_duration is None:
        total_duration = sum(p.duration_days for p in phases)

    return CostEstimate(
        total_estimate=_required_float(data, "totalEstimate"),
        breakdown=tuple(breakdown),
        confidence_level=clamp01(to_float(data.get("confidenceLevel")) or 0.0),
        risk_factors=_str_list(data.get("riskFactors")),
        recommendations=_str_list(data.get("recommendations")),
        assumptions=_str_list(data.get("assumptions")),
        phases=tuple(phases),
        total_duration_days=max(0, total_duration),
    )


def match_from_payload(data: dict[str, Any]) -> OpportunityMatch:
    return OpportunityMatch(
        match_score=clamp01(_required_float(data, "matchScore")),
        strengths=_str_list(data.get("strengths")),
        challenges=_str_list(data.get("challenges")),
        recommendations=_str_list(data.get("recommendations")),
        conversion_probability=clamp01(to_float(data.get("conversionProbability")) or 0.0),
    )
