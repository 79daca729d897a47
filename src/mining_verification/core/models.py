"""Pydantic data models: the shared business objects.

The evaluation engine, the response shaper, and the HTTP layer all speak in
these types. Every on-chain quantity is a plain Python ``int`` so comparisons
stay exact for the full uint256 range.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_RIG_NAME = "Unknown"


@runtime_checkable
class ReadableRig(Protocol):
    """Read-only view of one MiningRig contract.

    Implementations raise ``RigReadError`` when a read cannot be completed.
    """

    async def scores(self, wallet_address: str) -> ScoreData: ...

    async def score(self, wallet_address: str) -> int: ...


class ThresholdMetric(str, Enum):
    """Which per-rig figure a threshold is compared against."""

    TOTAL_MINING_TXS = "total_mining_txs"
    COMPUTED_SCORE = "computed_score"


class ScoreData(BaseModel):
    """Raw ``scores(address)`` tuple returned by a MiningRig contract."""

    model_config = ConfigDict(frozen=True)

    base: int = Field(ge=0)
    balance: int = Field(ge=0)
    frequency: int = Field(ge=0)
    held: int = Field(ge=0)
    debt: int = Field(ge=0)
    redeemable: int = Field(ge=0)
    total_mining_txs: int = Field(ge=0, description="Lifetime mining transactions on this rig")

    @property
    def has_mined(self) -> bool:
        return self.base > 0

    def component_strings(self) -> dict[str, str]:
        """Score components as decimal strings, in contract field order."""
        return {
            "base": str(self.base),
            "balance": str(self.balance),
            "frequency": str(self.frequency),
            "held": str(self.held),
            "debt": str(self.debt),
            "redeemable": str(self.redeemable),
        }


class RigEntry(BaseModel):
    """A configured rig: checksummed address, optional label, and its read adapter."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    address: str = Field(description="EIP-55 checksummed contract address")
    name: Optional[str] = Field(None, description="Human-readable rig label, e.g. 'SHIBA'")
    adapter: ReadableRig = Field(exclude=True)

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN_RIG_NAME


class EvaluationResult(BaseModel):
    """Outcome of checking one wallet against one rig."""

    has_mined: bool
    score_data: Optional[ScoreData] = None
    computed_score: Optional[int] = Field(None, ge=0)


class RigMatch(BaseModel):
    """A rig on which the wallet has mined, with the data that proved it."""

    entry: RigEntry
    score_data: ScoreData
    computed_score: int = Field(ge=0)

    def metric(self, which: ThresholdMetric) -> int:
        if which is ThresholdMetric.TOTAL_MINING_TXS:
            return self.score_data.total_mining_txs
        return self.computed_score


class HighestScoreOutcome(BaseModel):
    """Result of the max-score scan used by the plain verify endpoint."""

    best: Optional[RigMatch] = None
    last_error: Optional[str] = Field(None, description="Message of the last rig read failure")


class ThresholdOutcome(BaseModel):
    """Result of the threshold-first-match scan."""

    match: Optional[RigMatch] = Field(None, description="First rig meeting the threshold")
    first_mined: Optional[RigMatch] = Field(None, description="First rig with any mining activity")
    last_error: Optional[str] = None


class FirstMinedOutcome(BaseModel):
    """Result of the early-exit scan used for each batch wallet."""

    match: Optional[RigMatch] = None
    last_error: Optional[str] = None
