"""MiningRig contract client over Ethereum JSON-RPC.

Each read is a single ``eth_call`` against the ``latest`` block. Calldata and
return values are ABI-encoded with ``eth_abi``. There are no retries: a failed
call raises ``RigReadError`` and the caller decides what that means.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import httpx
from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from ..errors import RigReadError
from ..models import ScoreData

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# MiningRig view functions: signature -> return types
SCORES_SIGNATURE = "scores(address)"
SCORES_RETURN_TYPES = ["uint256"] * 7
SCORE_SIGNATURE = "score(address)"
SCORE_RETURN_TYPES = ["uint256"]

SCORES_SELECTOR = function_signature_to_4byte_selector(SCORES_SIGNATURE)
SCORE_SELECTOR = function_signature_to_4byte_selector(SCORE_SIGNATURE)

_request_ids = itertools.count(1)


def encode_address_call(selector: bytes, wallet_address: str) -> str:
    """Build hex calldata for a ``fn(address)`` call."""
    return "0x" + (selector + abi_encode(["address"], [to_checksum_address(wallet_address)])).hex()


class MiningRigClient:
    """Read adapter for one deployed MiningRig contract."""

    def __init__(
        self,
        rpc_url: str,
        address: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not rpc_url:
            raise ValueError("rpc_url is required")
        self.rpc_url = rpc_url
        self.address = to_checksum_address(address)
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(10.0, timeout_seconds))
        self._transport = transport

    def __repr__(self) -> str:
        return f"MiningRigClient(address={self.address!r})"

    async def scores(self, wallet_address: str) -> ScoreData:
        """Read ``scores(wallet)``: base, balance, frequency, held, debt, redeemable, totalMiningTxs."""
        raw = await self._call(SCORES_SELECTOR, wallet_address)
        values = self._decode(SCORES_RETURN_TYPES, raw, SCORES_SIGNATURE)
        base, balance, frequency, held, debt, redeemable, total_mining_txs = values
        return ScoreData(
            base=base,
            balance=balance,
            frequency=frequency,
            held=held,
            debt=debt,
            redeemable=redeemable,
            total_mining_txs=total_mining_txs,
        )

    async def score(self, wallet_address: str) -> int:
        """Read the contract-computed ``score(wallet)``."""
        raw = await self._call(SCORE_SELECTOR, wallet_address)
        (value,) = self._decode(SCORE_RETURN_TYPES, raw, SCORE_SIGNATURE)
        return value

    async def _call(self, selector: bytes, wallet_address: str) -> bytes:
        payload = {
            "jsonrpc": "2.0",
            "id": next(_request_ids),
            "method": "eth_call",
            "params": [
                {"to": self.address, "data": encode_address_call(selector, wallet_address)},
                "latest",
            ],
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                body = response.json()
            except httpx.HTTPStatusError as exc:
                raise RigReadError(
                    f"RPC endpoint returned HTTP {exc.response.status_code}", self.address
                ) from exc
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise RigReadError(f"RPC request failed: {exc}", self.address) from exc
            except ValueError as exc:
                raise RigReadError("RPC endpoint returned invalid JSON", self.address) from exc

        return self._result_bytes(body)

    def _result_bytes(self, body: Any) -> bytes:
        if not isinstance(body, dict):
            raise RigReadError("Malformed JSON-RPC response", self.address)

        error = body.get("error")
        if error:
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            raise RigReadError(f"eth_call failed: {message}", self.address)

        result = body.get("result")
        if not isinstance(result, str) or not result.startswith("0x"):
            raise RigReadError("Malformed JSON-RPC result", self.address)
        try:
            return bytes.fromhex(result[2:])
        except ValueError as exc:
            raise RigReadError("Malformed JSON-RPC result", self.address) from exc

    def _decode(self, types: list[str], raw: bytes, signature: str) -> tuple:
        if not raw:
            raise RigReadError(f"{signature} returned no data (is {self.address} a MiningRig?)", self.address)
        try:
            return abi_decode(types, raw)
        except DecodingError as exc:
            raise RigReadError(f"Could not decode {signature} result: {exc}", self.address) from exc
