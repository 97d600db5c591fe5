# permit_intel/adapters/permits/stub_json.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...config import Settings
from ...domain.types import Permit
from .base import PermitQuery, PermitSource
from .shovels import canonicalize_all


def city_slug(city: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", city.strip().lower()).strip("_")


def _as_list_of_dicts(payload: Any) -> list[dict[str, Any]]:
    """
    Accept either:
      - list[dict]
      - {"permits": list[dict]} (the live API shape)
    """
    if isinstance(payload, list):
        return [x for x in payload if isinstance(x, dict)]
    if isinstance(payload, dict):
        v = payload.get("permits")
        if isinstance(v, list):
            return [x for x in v if isinstance(x, dict)]
    return []


@dataclass
class StubJsonPermitSource(PermitSource):
    """
    Offline permit source for development/testing.

    Reads permit payloads from fixtures:
      <fixtures_dir>/<city_slug>.json   e.g. data/stub_permits/san_jose.json
    """

    fixtures_dir: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> "StubJsonPermitSource":
        return cls(fixtures_dir=Path(settings.PERMIT_FIXTURES_DIR))

    def _load(self, path: Path) -> list[Permit]:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return canonicalize_all(_as_list_of_dicts(raw))

    def _files(self, city: str | None) -> list[Path]:
        if city:
            path = self.fixtures_dir / f"{city_slug(city)}.json"
            # Dev-friendly: missing fixture city means "no permits"
            return [path] if path.exists() else []
        return sorted(self.fixtures_dir.glob("*.json"))

    async def search(self, query: PermitQuery) -> list[Permit]:
        out: list[Permit] = []
        for path in self._files(query.city):
            for p in self._load(path):
                if query.state and p.address.state.upper() != query.state.upper():
                    continue
                if query.permit_type and query.permit_type.lower() not in p.permit_type.lower():
                    continue
                if query.status and p.status.value != query.status:
                    continue
                if query.date_from and (p.issued_date is None or p.issued_date < query.date_from):
                    continue
                if query.date_to and (p.issued_date is None or p.issued_date > query.date_to):
                    continue
                out.append(p)
        return out[: int(query.limit)]

    async def get_by_id(self, permit_id: str) -> Permit | None:
        for path in self._files(None):
            for p in self._load(path):
                if p.id == permit_id:
                    return p
        return None

    async def by_contractor(self, contractor_name: str, *, limit: int = 100) -> list[Permit]:
        needle = contractor_name.strip().lower()
        out: list[Permit] = []
        for path in self._files(None):
            for p in self._load(path):
                if p.contractor and needle in p.contractor.name.lower():
                    out.append(p)
        return out[: int(limit)]
