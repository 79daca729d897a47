"""Error taxonomy shared by the engine and the HTTP layer."""

from __future__ import annotations


class MiningVerificationError(Exception):
    """Base class for errors raised by this package."""


class ClientInputError(MiningVerificationError):
    """Malformed caller input (address, threshold, batch body). Maps to HTTP 400."""


class RigReadError(MiningVerificationError):
    """A read against a MiningRig contract failed (transport, RPC error, revert, bad data)."""

    def __init__(self, message: str, rig_address: str | None = None):
        super().__init__(message)
        self.rig_address = rig_address


class ConfigurationError(MiningVerificationError):
    """The service cannot evaluate anything because no rigs are configured."""
