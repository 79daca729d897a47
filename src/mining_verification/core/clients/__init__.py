"""Contract clients."""
