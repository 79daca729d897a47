"""Storage for wallets already served in simple mode."""

from __future__ import annotations

from typing import Protocol


class QueriedAddressStore(Protocol):
    """Set of wallet addresses that have already passed a simple-mode check."""

    def contains(self, address: str) -> bool: ...

    def add(self, address: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryQueriedAddressStore:
    """Process-local store. Grows for the life of the process and is never pruned.

    Keys are compared case-insensitively. Check-then-add is not atomic: two
    concurrent first requests for the same wallet can both pass.
    """

    def __init__(self) -> None:
        self._addresses: set[str] = set()

    def __len__(self) -> int:
        return len(self._addresses)

    def contains(self, address: str) -> bool:
        return address.lower() in self._addresses

    def add(self, address: str) -> None:
        self._addresses.add(address.lower())

    def clear(self) -> None:
        self._addresses.clear()
