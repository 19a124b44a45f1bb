"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from tests.helpers.fake_processes import FakeClock

_ENV_PREFIX = "GRACEFUL_SHUTDOWN_"


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep developer shell settings from leaking into CLI defaults."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
