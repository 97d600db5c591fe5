# scripts/check_shovels_auth.py
from __future__ import annotations

import asyncio
import sys

from permit_intel.adapters.clients.shovels import ShovelsClient
from permit_intel.config import settings
from permit_intel.domain.errors import ConfigurationError


async def main() -> int:
    print("base url:", settings.SHOVELS_BASE_URL)
    try:
        client = ShovelsClient(settings)
    except ConfigurationError as e:
        print("not configured:", e)
        return 2

    ok = await client.test_connection()
    print("connection:", "ok" if ok else "FAILED (check key and base url)")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
