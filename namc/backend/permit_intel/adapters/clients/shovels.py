# permit_intel/adapters/clients/shovels.py
from __future__ import annotations

from typing import Any

import httpx

from ...config import Settings
from ...domain.errors import ConfigurationError
from .http_resilience import ResilientHttp


def _clean_params(params: dict[str, Any]) -> dict[str, Any]:
    return {k: str(v) for k, v in params.items() if v is not None and v != ""}


class ShovelsClient:
    """Minimal Shovels permits API client (raw JSON in, raw JSON out)."""

    def __init__(self, settings: Settings, *, http_client: httpx.AsyncClient | None = None) -> None:
        if not settings.SHOVELS_API_KEY:
            raise ConfigurationError("Shovels API key not configured. Set SHOVELS_API_KEY.")
        self.api_key = settings.SHOVELS_API_KEY
        self.base_url = settings.SHOVELS_BASE_URL.rstrip("/")
        self.http = ResilientHttp(settings, client=http_client)

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "authorization": f"Bearer {self.api_key}",
        }

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        resp = await self.http.request(
            "GET",
            f"{self.base_url}{path}",
            headers=self._headers(),
            params=_clean_params(params or {}),
        )
        return resp.json()

    @staticmethod
    def _permits(data: Any) -> list[dict[str, Any]]:
        items = data.get("permits") if isinstance(data, dict) else data
        if isinstance(items, list):
            return [x for x in items if isinstance(x, dict)]
        return []

    async def search_permits(
        self,
        *,
        city: str | None = None,
        state: str | None = None,
        permit_type: str | None = None,
        status: str | None = None,
        issued_from: str | None = None,
        issued_to: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        data = await self._get(
            "/permits",
            {
                "city": city,
                "state": state,
                "permit_type": permit_type,
                "status": status,
                "issued_date_from": issued_from,
                "issued_date_to": issued_to,
                "limit": int(limit),
            },
        )
        return self._permits(data)

    async def get_permit(self, permit_id: str) -> dict[str, Any] | None:
        try:
            data = await self._get(f"/permits/{permit_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        permit = data.get("permit") if isinstance(data, dict) else None
        return permit if isinstance(permit, dict) else None

    async def get_permits_by_contractor(self, contractor_name: str, *, limit: int = 100) -> list[dict[str, Any]]:
        data = await self._get("/permits", {"contractor_name": contractor_name, "limit": limit})
        return self._permits(data)

    async def test_connection(self) -> bool:
        try:
            await self._get("/permits", {"limit": 1})
        except httpx.HTTPError:
            return False
        return True
