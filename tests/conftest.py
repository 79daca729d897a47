from __future__ import annotations

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from mining_verification.config import Settings
from mining_verification.core.registry import RigRegistry
from mining_verification.core.store import InMemoryQueriedAddressStore
from mining_verification.server import create_app


@pytest.fixture
def store() -> InMemoryQueriedAddressStore:
    return InMemoryQueriedAddressStore()


@pytest.fixture
def make_client(store):
    """Factory: ``make_client(registry, simple_mode=False)`` -> TestClient."""

    def _make(registry: Optional[RigRegistry] = None, simple_mode: bool = False, **client_kwargs) -> TestClient:
        app = create_app(
            settings=Settings(simple_mode=simple_mode),
            registry=registry if registry is not None else RigRegistry(),
            store=store,
        )
        return TestClient(app, **client_kwargs)

    return _make
