# permit_intel/adapters/permits/shovels.py
from __future__ import annotations

import logging
from typing import Any

from ...domain.parsing import permit_from_payload
from ...domain.types import Permit
from ..clients.shovels import ShovelsClient
from .base import PermitQuery, PermitSource

log = logging.getLogger(__name__)


def canonicalize_all(items: list[dict[str, Any]]) -> list[Permit]:
    """Records without an id are dropped (logged), everything else is kept in order."""
    out: list[Permit] = []
    for it in items:
        try:
            out.append(permit_from_payload(it))
        except ValueError as e:
            log.warning("skipping permit record: %s", e)
    return out


class ShovelsPermitSource(PermitSource):
    def __init__(self, client: ShovelsClient) -> None:
        self.client = client

    async def search(self, query: PermitQuery) -> list[Permit]:
        items = await self.client.search_permits(
            city=query.city,
            state=query.state,
            permit_type=query.permit_type,
            status=query.status,
            issued_from=query.date_from.isoformat() if query.date_from else None,
            issued_to=query.date_to.isoformat() if query.date_to else None,
            limit=query.limit,
        )
        return canonicalize_all(items)

    async def get_by_id(self, permit_id: str) -> Permit | None:
        raw = await self.client.get_permit(permit_id)
        if raw is None:
            return None
        return permit_from_payload(raw)

    async def by_contractor(self, contractor_name: str, *, limit: int = 100) -> list[Permit]:
        return canonicalize_all(await self.client.get_permits_by_contractor(contractor_name, limit=limit))
