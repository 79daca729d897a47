"""Mining Verification API.

Checks whether a wallet has mined on one or more MiningRig contracts by
reading their on-chain view functions, and serves the verdict as JSON.
"""

__version__ = "0.1.0"
