"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

# Use litellm's bundled model cost map; the remote fetch fails offline and its
# background retry thread can deadlock with test-module imports.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from pagebot.session.state import Session

ADMIN_ID = "1000001"
USER_ID = "2000002"


@pytest.fixture
def session():
    """Session owned by ADMIN_ID, started at a fixed instant."""
    return Session(admin_id=ADMIN_ID, started_at=datetime(2024, 1, 1, 12, 0, 0))


@pytest.fixture
def messenger():
    """Graph API client double; every method is awaitable and calls are recorded in order."""
    return AsyncMock()


@pytest.fixture(autouse=True)
def _no_port_env(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
