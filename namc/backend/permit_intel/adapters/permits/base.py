# permit_intel/adapters/permits/base.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from ...domain.types import Permit


@dataclass(frozen=True)
class PermitQuery:
    """
    What a permit source is asked for.

    Valuation bounds are deliberately absent: upstream can't filter on them,
    so the service applies them after the fetch.
    """

    city: str | None = None
    state: str | None = None
    permit_type: str | None = None
    status: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    limit: int = 50


class PermitSource(Protocol):
    async def search(self, query: PermitQuery) -> list[Permit]:
        raise NotImplementedError

    async def get_by_id(self, permit_id: str) -> Permit | None:
        raise NotImplementedError

    async def by_contractor(self, contractor_name: str, *, limit: int = 100) -> list[Permit]:
        raise NotImplementedError
