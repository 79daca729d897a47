"""Parsing of threshold path parameters into exact non-negative integers.

Both thresholds are compared against uint256 contract values, so anything
above ``2**256 - 1`` is rejected as client input. Digit bodies are length
checked before conversion so oversized inputs never reach ``int()``.
"""

from __future__ import annotations

import re

from .errors import ClientInputError

UINT256_MAX = 2**256 - 1

_DECIMAL = re.compile(r"^[0-9]+$")
_PREFIXED = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
_PREFIX_BASES = {"x": 16, "o": 8, "b": 2}

# Digits needed to spell UINT256_MAX in each base.
_MAX_DIGITS = {10: 78, 16: 64, 8: 86, 2: 256}


def _bounded_int(digits: str, base: int, error: str) -> int:
    significant = digits.lstrip("0") or "0"
    if len(significant) > _MAX_DIGITS[base]:
        raise ClientInputError(error)
    value = int(significant, base)
    if value > UINT256_MAX:
        raise ClientInputError(error)
    return value


def parse_min_txs(raw: str) -> int:
    """Minimum transaction count: plain decimal digits only."""
    error = "Invalid minimum transactions value"
    value = raw.strip()
    if not _DECIMAL.match(value):
        raise ClientInputError(error)
    return _bounded_int(value, 10, error)


def parse_min_score(raw: str) -> int:
    """Minimum score: a non-negative big integer, decimal or 0x/0o/0b prefixed."""
    error = "Invalid minimum score value"
    value = raw.strip()
    if _DECIMAL.match(value):
        return _bounded_int(value, 10, error)
    if _PREFIXED.match(value):
        return _bounded_int(value[2:], _PREFIX_BASES[value[1].lower()], error)
    raise ClientInputError(error)
