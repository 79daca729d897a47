"""Exercise every endpoint of a running Mining Verification API.

Usage:
    API_URL=http://localhost:3000 python scripts/smoke_check.py [wallet ...]
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys

import httpx

logger = logging.getLogger("smoke_check")

API_URL = os.environ.get("API_URL", "http://localhost:3000")
DEFAULT_WALLETS = [
    "0xb814ae6b2f368e8e8392b7d897044677f5f8be2b",
    "0x1234567890123456789012345678901234567890",
]


def _show(label: str, response: httpx.Response) -> dict:
    body = response.json()
    logger.info("%s -> HTTP %d\n%s", label, response.status_code, json.dumps(body, indent=2))
    return body


async def run(wallets: list[str]) -> None:
    wallet = wallets[0]
    async with httpx.AsyncClient(base_url=API_URL, timeout=httpx.Timeout(30.0, connect=10.0)) as client:
        _show("health", await client.get("/health"))

        body = _show("verify", await client.get(f"/api/verify/{wallet}"))
        if body.get("hasMined"):
            logger.info("Wallet has mined: score=%s txs=%s", body["data"]["score"], body["data"]["totalMiningTxs"])
        else:
            logger.info("Wallet has not mined yet")

        _show("min-txs 10", await client.get(f"/api/verify/{wallet}/min-txs/10"))
        _show("min-score 100", await client.get(f"/api/verify/{wallet}/min-score/100"))
        _show("batch", await client.post("/api/verify/batch", json={"walletAddresses": wallets}))
        _show("invalid address", await client.get("/api/verify/invalid-address"))


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    wallets = sys.argv[1:] or DEFAULT_WALLETS
    try:
        asyncio.run(run(wallets))
    except httpx.HTTPError as exc:
        logger.error("Smoke check failed against %s: %s", API_URL, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
