# tests/test_stub_source.py
import json
from datetime import date
from pathlib import Path

import pytest

from permit_intel.adapters.permits.base import PermitQuery
from permit_intel.adapters.permits.stub_json import StubJsonPermitSource, city_slug


def _write(dirpath: Path, name: str, payload) -> None:
    (dirpath / name).write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def fixtures(tmp_path: Path) -> Path:
    _write(
        tmp_path,
        "san_jose.json",
        {
            "permits": [
                {"id": "sj-1", "permit_number": "SJ1", "permit_type": "Kitchen Remodel", "status": "issued",
                 "issued_date": "2025-08-01", "address": {"city": "San Jose", "state": "CA"}},
                {"id": "sj-2", "permit_number": "SJ2", "permit_type": "Roofing", "status": "pending",
                 "issued_date": "2025-05-01", "address": {"city": "San Jose", "state": "CA"}},
            ]
        },
    )
    _write(
        tmp_path,
        "oakland.json",
        [{"id": "oak-1", "permit_number": "O1", "permit_type": "Solar", "status": "issued",
          "issued_date": "2025-09-10", "address": "12 Grand Ave", "city": "Oakland", "state": "CA"}],
    )
    return tmp_path


def test_city_slug():
    assert city_slug("San Jose") == "san_jose"
    assert city_slug("  St. Helena ") == "st_helena"


async def test_search_by_city_and_filters(fixtures):
    src = StubJsonPermitSource(fixtures_dir=fixtures)

    all_sj = await src.search(PermitQuery(city="San Jose"))
    assert [p.id for p in all_sj] == ["sj-1", "sj-2"]

    kitchens = await src.search(PermitQuery(city="San Jose", permit_type="kitchen"))
    assert [p.id for p in kitchens] == ["sj-1"]

    recent = await src.search(PermitQuery(city="San Jose", date_from=date(2025, 7, 1)))
    assert [p.id for p in recent] == ["sj-1"]

    limited = await src.search(PermitQuery(city="San Jose", limit=1))
    assert len(limited) == 1


async def test_unknown_city_is_empty(fixtures):
    src = StubJsonPermitSource(fixtures_dir=fixtures)
    assert await src.search(PermitQuery(city="Fremont")) == []


async def test_get_by_id_scans_all_files(fixtures):
    src = StubJsonPermitSource(fixtures_dir=fixtures)
    p = await src.get_by_id("oak-1")
    assert p is not None
    assert p.address.street == "12 Grand Ave"
    assert await src.get_by_id("nope") is None


async def test_by_contractor_is_case_insensitive(tmp_path: Path):
    _write(
        tmp_path,
        "berkeley.json",
        [
            {"id": "b-1", "contractor": {"name": "Bay Builders Inc"}},
            {"id": "b-2", "contractor": {"name": "Other Co"}},
            {"id": "b-3"},
        ],
    )
    src = StubJsonPermitSource(fixtures_dir=tmp_path)
    assert [p.id for p in await src.by_contractor("bay builders")] == ["b-1"]
