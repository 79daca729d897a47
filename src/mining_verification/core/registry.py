"""Rig registry: the ordered set of MiningRig contracts a wallet is checked against."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from eth_utils import to_checksum_address

from .addresses import is_valid_address
from .clients.rig import MiningRigClient
from .errors import ConfigurationError
from .models import RigEntry

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class RigRegistry:
    """Immutable, ordered collection of ``RigEntry``.

    Registry order is the scan order used by every aggregation policy.
    ``configured`` lists the valid rigs from configuration for ``/health``;
    it can be longer than ``entries`` when no RPC endpoint is available.
    """

    def __init__(
        self,
        entries: Iterable[RigEntry] = (),
        invalid_addresses: Iterable[str] = (),
        configured: Optional[Iterable[dict[str, Optional[str]]]] = None,
    ):
        self._entries: tuple[RigEntry, ...] = tuple(entries)
        self.invalid_addresses: tuple[str, ...] = tuple(invalid_addresses)
        if configured is None:
            configured = [{"address": e.address, "name": e.name} for e in self._entries]
        self._configured: tuple[dict[str, Optional[str]], ...] = tuple(dict(c) for c in configured)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @property
    def entries(self) -> tuple[RigEntry, ...]:
        return self._entries

    def require_rigs(self) -> tuple[RigEntry, ...]:
        """Entries to evaluate against; raises ``ConfigurationError`` when none are configured."""
        if not self._entries:
            raise ConfigurationError("MiningRig contracts not configured")
        return self._entries

    def describe(self) -> list[dict[str, Optional[str]]]:
        return [dict(c) for c in self._configured]


def build_registry(settings: Settings) -> RigRegistry:
    """Create one ``MiningRigClient`` per valid configured rig address.

    Invalid addresses are logged and skipped; duplicates keep their first
    position. Without an RPC URL nothing can be read, so the registry has no
    entries to scan but still describes the configured rigs.
    """
    entries: list[RigEntry] = []
    invalid: list[str] = []
    seen: set[str] = set()
    configured: list[dict[str, Optional[str]]] = []

    for rig in settings.rigs:
        if not is_valid_address(rig.address):
            logger.error("Invalid rig address %r (%s) ignored", rig.address, rig.name or "unnamed")
            invalid.append(rig.address)
            continue
        address = to_checksum_address(rig.address)
        if address in seen:
            logger.warning("Duplicate rig address %s ignored", address)
            continue
        seen.add(address)
        configured.append({"address": address, "name": rig.name})
        if settings.rpc_url:
            adapter = MiningRigClient(settings.rpc_url, address, timeout_seconds=settings.rpc_timeout_seconds)
            entries.append(RigEntry(address=address, name=rig.name, adapter=adapter))

    if not settings.rpc_url:
        logger.warning("RPC_URL not set, no MiningRig contracts will be queried")
    else:
        logger.info(
            "Configured mining rigs: %s",
            ", ".join(f"{e.display_name} ({e.address})" for e in entries) or "none",
        )
    return RigRegistry(entries, invalid, configured)
