"""JSON response shapes for every endpoint.

Numbers are always emitted as decimal strings so uint256 values survive JSON
clients that parse numbers as doubles. Mined responses carry both top-level
fields and a nested ``data`` mirror; clients depend on both.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from .models import RigMatch

NOT_MINED_MESSAGE = "User has not mined yet"
SIMPLE_REPEAT_MESSAGE = "You already did this or have not mined"
INTERNAL_ERROR = "Internal server error"


def error_body(error: str, message: Optional[str] = None) -> dict:
    body: dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        body["message"] = message
    return body


def server_error(message: Optional[str] = None) -> dict:
    return error_body(INTERNAL_ERROR, message)


def health(contracts: list[dict]) -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "contract": contracts[0] if contracts else None,
        "contracts": contracts,
    }


# ─── Plain verify ────────────────────────────────────────────────────────────


def verify_mined(wallet_address: str, match: RigMatch) -> dict:
    rig_name = match.entry.display_name
    return {
        "success": True,
        "hasMined": True,
        "contractAddress": match.entry.address,
        "rigName": rig_name,
        "data": {
            "walletAddress": wallet_address,
            "hasMined": True,
            "rigName": rig_name,
            "score": str(match.computed_score),
            "totalMiningTxs": str(match.score_data.total_mining_txs),
            "scores": match.score_data.component_strings(),
        },
    }


def verify_not_mined() -> dict:
    return {
        "success": False,
        "hasMined": False,
        "message": NOT_MINED_MESSAGE,
        "data": {"hasMined": False},
    }


def simple_pass(computed_score: int) -> dict:
    return {"success": True, "message": f"Pass - Your score is {computed_score}"}


def simple_fail() -> dict:
    return {"success": False, "message": "Fail - Your score is 0"}


def simple_repeat() -> dict:
    return {"success": False, "message": SIMPLE_REPEAT_MESSAGE}


# ─── Thresholds ──────────────────────────────────────────────────────────────


def min_txs_result(wallet_address: str, match: RigMatch, required_txs: int, meets: bool) -> dict:
    rig_name = match.entry.display_name
    return {
        "success": meets,
        "hasMined": True,
        "contractAddress": match.entry.address,
        "rigName": rig_name,
        "totalMiningTxs": str(match.score_data.total_mining_txs),
        "requiredTxs": str(required_txs),
        "meetsRequirement": meets,
        "data": {
            "walletAddress": wallet_address,
            "hasMined": True,
            "rigName": rig_name,
            "score": str(match.computed_score),
        },
    }


def min_txs_not_mined(required_txs: int) -> dict:
    return {
        "success": False,
        "hasMined": False,
        "totalMiningTxs": "0",
        "requiredTxs": str(required_txs),
        "message": NOT_MINED_MESSAGE,
        "data": {"hasMined": False},
    }


def min_score_result(wallet_address: str, match: RigMatch, required_score: int, meets: bool) -> dict:
    rig_name = match.entry.display_name
    return {
        "success": meets,
        "hasMined": True,
        "contractAddress": match.entry.address,
        "rigName": rig_name,
        "score": str(match.computed_score),
        "requiredScore": str(required_score),
        "meetsRequirement": meets,
        "data": {
            "walletAddress": wallet_address,
            "hasMined": True,
            "rigName": rig_name,
            "totalMiningTxs": str(match.score_data.total_mining_txs),
        },
    }


def min_score_not_mined(required_score: int) -> dict:
    return {
        "success": False,
        "hasMined": False,
        "score": "0",
        "requiredScore": str(required_score),
        "message": NOT_MINED_MESSAGE,
        "data": {"hasMined": False},
    }


# ─── Batch ───────────────────────────────────────────────────────────────────


def batch_item_mined(wallet_address: str, match: RigMatch) -> dict:
    rig_name = match.entry.display_name
    return {
        "walletAddress": wallet_address,
        "success": True,
        "hasMined": True,
        "contractAddress": match.entry.address,
        "rigName": rig_name,
        "data": {
            "hasMined": True,
            "rigName": rig_name,
            "score": str(match.computed_score),
            "totalMiningTxs": str(match.score_data.total_mining_txs),
        },
    }


def batch_item_not_mined(wallet_address: str) -> dict:
    return {
        "walletAddress": wallet_address,
        "success": False,
        "hasMined": False,
        "data": {"hasMined": False},
    }


def batch_item_error(wallet_address: Any, error: str) -> dict:
    return {"walletAddress": wallet_address, "success": False, "error": error}


def batch(results: list[dict]) -> dict:
    return {"success": True, "results": results}
