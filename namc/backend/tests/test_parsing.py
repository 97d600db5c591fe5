import pytest

from permit_intel.domain.errors import AssistantResponseError
from permit_intel.domain.json_extract import extract_first_json_object
from permit_intel.domain.parsing import (
    analysis_from_payload,
    cost_estimate_from_payload,
    match_from_payload,
    permit_from_payload,
)
from permit_intel.domain.types import Level, PermitStatus


def test_permit_from_nested_payload():
    p = permit_from_payload(
        {
            "id": "abc",
            "permit_number": "B-1",
            "permit_type": "Residential Addition",
            "status": "Under Review",
            "issued_date": "2025-09-02T00:00:00Z",
            "valuation": 185000,
            "description": "Addition",
            "address": {"street": "1 Main", "city": "Oakland", "state": "CA", "zip": "94611", "latitude": 37.8},
            "contractor": {"name": "Bay Builders", "license_number": "998877"},
            "owner": {"name": "R. Alvarez", "phone": "510"},
        }
    )
    assert p.status == PermitStatus.under_review
    assert p.issued_date.isoformat() == "2025-09-02"
    assert p.valuation == 185000.0
    assert p.address.city == "Oakland"
    assert p.address.latitude == 37.8
    assert p.contractor.license_number == "998877"
    assert p.owner.name == "R. Alvarez"


def test_permit_from_flat_payload_and_missing_valuation():
    p = permit_from_payload(
        {"id": 7, "number": "E-9", "type": "Electrical", "city": "Berkeley", "state": "CA", "zip_code": "94704",
         "address": "5 Oak St", "job_value": None, "status": "weird"}
    )
    assert p.id == "7"
    assert p.permit_number == "E-9"
    assert p.address.street == "5 Oak St"
    assert p.address.zip == "94704"
    assert p.valuation is None
    assert p.status == PermitStatus.pending
    assert p.contractor is None


def test_permit_without_id_is_rejected():
    with pytest.raises(ValueError):
        permit_from_payload({"permit_number": "B-1"})


def test_analysis_payload_is_validated_and_clamped():
    a = analysis_from_payload(
        {
            "opportunityScore": 1.4,
            "complexityScore": "0.3",
            "projectComplexity": "high",
            "competitionLevel": "LOW",
            "timelineEstimate": 45.7,
            "riskFactors": ["Permits", "", None],
            "costRangeEstimate": {"low": 90000, "high": 60000, "confidence": 2},
        }
    )
    assert a.opportunity_score == 1.0
    assert a.complexity_score == 0.3
    assert a.project_complexity == Level.HIGH
    assert a.timeline_estimate_days == 45
    assert a.risk_factors == ("Permits",)
    assert a.key_requirements == ()
    assert a.is_fallback is False

    cr = a.cost_range_estimate
    assert cr.low <= cr.high
    assert (cr.low, cr.high) == (60000.0, 90000.0)
    assert 0.0 <= cr.confidence <= 1.0


def test_analysis_missing_required_field_raises():
    with pytest.raises(AssistantResponseError, match="opportunityScore"):
        analysis_from_payload(
            {"complexityScore": 0.3, "projectComplexity": "LOW", "competitionLevel": "LOW", "timelineEstimate": 10}
        )


def test_analysis_bad_level_raises():
    with pytest.raises(AssistantResponseError):
        analysis_from_payload(
            {"opportunityScore": 0.3, "complexityScore": 0.3, "projectComplexity": "EXTREME",
             "competitionLevel": "LOW", "timelineEstimate": 10}
        )


def test_cost_estimate_payload():
    est = cost_estimate_from_payload(
        {
            "totalEstimate": 200000,
            "breakdown": [{"category": "Labor", "amount": 80000, "percentage": 40}],
            "confidenceLevel": 0.6,
            "assumptions": ["Standard finishes"],
            "timeline": {"phases": [{"name": "Framing", "duration": 20, "cost": 50000},
                                    {"name": "Finish", "duration": 15, "cost": 30000}]},
        }
    )
    assert est.total_estimate == 200000.0
    assert est.breakdown[0].category == "Labor"
    assert est.total_duration_days == 35
    assert [p.name for p in est.phases] == ["Framing", "Finish"]


def test_match_payload():
    m = match_from_payload({"matchScore": 0.72, "strengths": ["Local"], "conversionProbability": 0.4})
    assert m.match_score == 0.72
    assert m.strengths == ("Local",)
    assert m.challenges == ()
    assert m.conversion_probability == 0.4


def _analysis(**overrides):
    data = {
        "opportunityScore": 0.6,
        "complexityScore": 0.3,
        "projectComplexity": "LOW",
        "competitionLevel": "LOW",
        "timelineEstimate": 30,
    }
    data.update(overrides)
    return data


def test_nan_score_from_model_reply_is_rejected():
    payload = extract_first_json_object('{"opportunityScore": NaN, "complexityScore": 0.3, '
                                        '"projectComplexity": "LOW", "competitionLevel": "LOW", "timelineEstimate": 30}')
    with pytest.raises(AssistantResponseError, match="opportunityScore"):
        analysis_from_payload(payload)


def test_infinite_score_is_rejected():
    with pytest.raises(AssistantResponseError, match="complexityScore"):
        analysis_from_payload(_analysis(complexityScore=float("inf")))


@pytest.mark.parametrize("low,high", [(float("nan"), 5), (1000, float("inf")), (float("-inf"), float("nan"))])
def test_non_finite_cost_bounds_drop_the_range(low, high):
    a = analysis_from_payload(_analysis(costRangeEstimate={"low": low, "high": high, "confidence": 0.5}))
    assert a.cost_range_estimate is None


def test_nan_confidence_becomes_zero():
    a = analysis_from_payload(_analysis(costRangeEstimate={"low": 1, "high": 5, "confidence": float("nan")}))
    assert a.cost_range_estimate.confidence == 0.0


def test_nan_valuation_is_treated_as_missing():
    p = permit_from_payload({"id": "n1", "valuation": float("nan")})
    assert p.valuation is None
