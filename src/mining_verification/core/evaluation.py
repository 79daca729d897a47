"""Mining evaluation engine.

Decides whether a wallet has mined on a rig and aggregates that decision
across the registry. Three aggregation policies exist, one per caller:

* ``find_highest_score``: plain verify, best computed score across all rigs.
* ``find_first_meeting_threshold``: min-txs and min-score, first rig in
  registry order that meets the threshold, remembering the first mined rig.
* ``find_first_mined``: batch, first mined rig in registry order, no
  best-score search.

A rig whose evaluation raises never aborts a scan; its message is kept
as ``last_error`` and the callers decide whether it outranks "not mined".
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from . import responses
from .addresses import is_valid_address
from .models import (
    EvaluationResult,
    FirstMinedOutcome,
    HighestScoreOutcome,
    RigEntry,
    RigMatch,
    ThresholdMetric,
    ThresholdOutcome,
)

logger = logging.getLogger(__name__)


async def evaluate_contract(entry: RigEntry, wallet_address: str) -> EvaluationResult:
    """Check one wallet against one rig.

    ``scores()`` failures propagate to the caller. ``score()`` is only
    read once ``base > 0``; if that second read fails the rig is treated as
    "not mined" rather than as an error.
    """
    score_data = await entry.adapter.scores(wallet_address)
    if score_data is None or not score_data.has_mined:
        return EvaluationResult(has_mined=False)

    try:
        computed_score = await entry.adapter.score(wallet_address)
    except Exception as exc:
        logger.warning(
            "score() failed on rig %s for %s after scores() reported mining: %s",
            entry.address, wallet_address, exc,
        )
        return EvaluationResult(has_mined=False)

    return EvaluationResult(has_mined=True, score_data=score_data, computed_score=computed_score)


def _as_match(entry: RigEntry, evaluation: EvaluationResult) -> RigMatch:
    return RigMatch(entry=entry, score_data=evaluation.score_data, computed_score=evaluation.computed_score)


async def find_highest_score(rigs: Sequence[RigEntry], wallet_address: str) -> HighestScoreOutcome:
    """Scan every rig and keep the mined one with the strictly highest score.

    Ties keep the earlier rig. A mined rig must score above zero to be kept.
    """
    best = None
    highest = 0
    last_error = None

    for entry in rigs:
        try:
            evaluation = await evaluate_contract(entry, wallet_address)
        except Exception as exc:
            last_error = str(exc)
            logger.warning("Error evaluating rig %s for %s: %s", entry.address, wallet_address, exc)
            continue

        if evaluation.has_mined and evaluation.computed_score > highest:
            highest = evaluation.computed_score
            best = _as_match(entry, evaluation)

    return HighestScoreOutcome(best=best, last_error=last_error)


async def find_first_meeting_threshold(
    rigs: Sequence[RigEntry],
    wallet_address: str,
    metric: ThresholdMetric,
    threshold: int,
) -> ThresholdOutcome:
    """Return on the first rig whose ``metric`` is ``>= threshold``.

    Rigs are visited in registry order; the first mined rig is remembered so
    callers can report how close the wallet came.
    """
    first_mined = None
    last_error = None

    for entry in rigs:
        try:
            evaluation = await evaluate_contract(entry, wallet_address)
        except Exception as exc:
            last_error = str(exc)
            logger.warning("Error evaluating rig %s for %s: %s", entry.address, wallet_address, exc)
            continue

        if not evaluation.has_mined:
            continue

        match = _as_match(entry, evaluation)
        if first_mined is None:
            first_mined = match
        if match.metric(metric) >= threshold:
            return ThresholdOutcome(match=match, first_mined=first_mined, last_error=last_error)

    return ThresholdOutcome(first_mined=first_mined, last_error=last_error)


async def find_first_mined(rigs: Sequence[RigEntry], wallet_address: str) -> FirstMinedOutcome:
    """Return on the first rig (registry order) where the wallet has mined."""
    last_error = None

    for entry in rigs:
        try:
            evaluation = await evaluate_contract(entry, wallet_address)
        except Exception as exc:
            last_error = str(exc)
            logger.warning("Error evaluating batch rig %s for %s: %s", entry.address, wallet_address, exc)
            continue

        if evaluation.has_mined:
            return FirstMinedOutcome(match=_as_match(entry, evaluation))

    return FirstMinedOutcome(last_error=last_error)


async def _verify_batch_item(rigs: Sequence[RigEntry], wallet_address: Any) -> dict:
    if not is_valid_address(wallet_address):
        return responses.batch_item_error(wallet_address, "Invalid address")

    try:
        outcome = await find_first_mined(rigs, wallet_address)
    except Exception as exc:
        logger.exception("Batch evaluation failed for %s", wallet_address)
        return responses.batch_item_error(wallet_address, str(exc))

    if outcome.match is not None:
        return responses.batch_item_mined(wallet_address, outcome.match)
    if outcome.last_error:
        return responses.batch_item_error(wallet_address, outcome.last_error)
    return responses.batch_item_not_mined(wallet_address)


async def verify_batch(rigs: Sequence[RigEntry], wallet_addresses: Sequence[Any]) -> list[dict]:
    """Evaluate every wallet concurrently; results keep input order.

    Each wallet's outcome is independent: an invalid address or a failure
    for one wallet is reported in its own entry only.
    """
    return list(await asyncio.gather(*(_verify_batch_item(rigs, w) for w in wallet_addresses)))
