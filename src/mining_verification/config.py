"""Environment-driven configuration.

All settings come from process environment variables. Nothing is read from
disk; export variables (or use your process manager's env file) before start.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_SHIBA_RIG_ADDRESS = "0x86Ae97f9245c592d2cDA14D1BC31104228eAE569"
DEFAULT_PEPE_RIG_ADDRESS = "0x26AB793aD774944403b29dE4eC44060bCb7e4735"
DEFAULT_PORT = 3000
DEFAULT_RPC_TIMEOUT_SECONDS = 30.0


class RigConfig(BaseModel):
    """One configured rig before address validation."""

    address: str
    name: Optional[str] = None


class Settings(BaseModel):
    """Service settings resolved from the environment."""

    rpc_url: Optional[str] = Field(None, description="JSON-RPC endpoint used for eth_call")
    rigs: list[RigConfig] = Field(default_factory=list)
    simple_mode: bool = Field(False, description="Collapse verify responses to pass/fail and gate repeats")
    rpc_timeout_seconds: float = DEFAULT_RPC_TIMEOUT_SECONDS
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def parse_rig_list(raw: str) -> list[RigConfig]:
    """Parse ``MINING_RIG_ADDRESSES``: comma-separated ``NAME=0x...`` or bare ``0x...`` items."""
    rigs = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if "=" in item:
            name, _, address = item.partition("=")
            rigs.append(RigConfig(address=address.strip(), name=name.strip() or None))
        else:
            rigs.append(RigConfig(address=item))
    return rigs


def _env_number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", key, raw, default)
        return default


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``env`` (defaults to ``os.environ``)."""
    if env is None:
        env = os.environ

    rig_list = env.get("MINING_RIG_ADDRESSES", "")
    if rig_list.strip():
        rigs = parse_rig_list(rig_list)
    else:
        rigs = [
            RigConfig(address=env.get("SHIBA_RIG_ADDRESS") or DEFAULT_SHIBA_RIG_ADDRESS, name="SHIBA"),
            RigConfig(address=env.get("PEPE_RIG_ADDRESS") or DEFAULT_PEPE_RIG_ADDRESS, name="PEPE"),
        ]

    return Settings(
        rpc_url=env.get("RPC_URL") or None,
        rigs=rigs,
        simple_mode=env.get("SIMPLE_MODE") == "true",
        rpc_timeout_seconds=_env_number(env, "RPC_TIMEOUT_SECONDS", DEFAULT_RPC_TIMEOUT_SECONDS, float),
        host=env.get("HOST") or "0.0.0.0",
        port=_env_number(env, "PORT", DEFAULT_PORT, int),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )
