"""Shared pytest fixtures and configuration."""

import pytest

from pokerdot.config import Config
from pokerdot.session import SessionCache
from pokerdot.storage import MemoryStorage


class FakeClock:
    """Settable epoch-millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cache(storage, clock):
    return SessionCache(storage, clock=clock)


@pytest.fixture
def fast_config(tmp_path):
    """Reconnect policy with no waiting, for bridge tests."""
    return Config(
        data_dir=tmp_path,
        min_reconnect_delay=0.0,
        reconnect_jitter=0.0,
        max_reconnect_delay=0.0,
        connection_timeout=1.0,
    )
