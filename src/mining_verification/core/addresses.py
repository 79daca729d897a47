"""Wallet and contract address validation.

Validation follows ``eth_utils``: mixed-case input must carry a correct
EIP-55 checksum; all-lower and all-upper hex are accepted as-is.
"""

from __future__ import annotations

from typing import Any

from eth_utils import is_address


def is_valid_address(value: Any) -> bool:
    """True if ``value`` is a string holding a checksummable hex address."""
    if not isinstance(value, str):
        return False
    return is_address(value)
