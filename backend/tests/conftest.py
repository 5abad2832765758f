"""Shared fixtures for relay tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from game_relay.core.config import Settings
from game_relay.main import create_app
from game_relay.realtime.engine import RelayEngine
from game_relay.realtime.registry import RoomRegistry


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def relay(registry: RoomRegistry) -> RelayEngine:
    return RelayEngine(registry)


@pytest.fixture
def client():
    app = create_app(Settings())
    with TestClient(app) as test_client:
        yield test_client
