# permit_intel/adapters/clients/http_resilience.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from ...config import Settings

log = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


@dataclass
class _CircuitState:
    fails: int = 0
    opened_at: float | None = None


class ResilientHttp:
    """
    Retry + circuit breaker around one httpx.AsyncClient.

    One instance per upstream, so one flaky vendor can't open the circuit for another.
    """

    def __init__(self, settings: Settings, *, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._client = client
        self._circuit = _CircuitState()

    def _circuit_is_open(self, now: float) -> bool:
        if self._circuit.opened_at is None:
            return False
        return (now - self._circuit.opened_at) < float(self.settings.HTTP_CIRCUIT_RESET_S)

    def _circuit_on_success(self) -> None:
        self._circuit.fails = 0
        self._circuit.opened_at = None

    def _circuit_on_failure(self) -> None:
        self._circuit.fails += 1
        if self._circuit.fails >= int(self.settings.HTTP_CIRCUIT_FAIL_THRESHOLD):
            self._circuit.opened_at = time.time()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)
        timeout = httpx.Timeout(float(self.settings.HTTP_TIMEOUT_S))
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.request(method, url, **kwargs)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        if self._circuit_is_open(time.time()):
            raise httpx.HTTPError(f"circuit_open: refusing external call to {url}")

        max_retries = int(self.settings.HTTP_MAX_RETRIES)
        backoff = float(self.settings.HTTP_BACKOFF_BASE_S)

        last_exc: Exception | None = None
        for attempt in range(max_retries + 1):
            try:
                resp = await self._send(method, url, headers=headers, params=params, json=json)

                if resp.status_code in RETRYABLE_STATUS:
                    raise httpx.HTTPStatusError("retryable_status", request=resp.request, response=resp)

                resp.raise_for_status()
                self._circuit_on_success()
                return resp
            except (httpx.TimeoutException, httpx.NetworkError, httpx.HTTPStatusError) as e:
                last_exc = e
                # 4xx other than 429 won't get better on retry
                if isinstance(e, httpx.HTTPStatusError) and e.response.status_code not in RETRYABLE_STATUS:
                    break
                self._circuit_on_failure()
                if attempt >= max_retries:
                    break
                delay = min(5.0, backoff * (2**attempt))
                log.warning("retrying %s %s in %.2fs after %s", method, url, delay, type(e).__name__)
                await asyncio.sleep(delay)

        assert last_exc is not None
        raise last_exc
