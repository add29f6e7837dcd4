"""
Shared pytest fixtures: settings, a fixed clock, and in-memory collaborators.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from hnmirror.config import ListingSettings, MirrorSettings, Settings
from hnmirror.mirror.exceptions import FetchError
from tests.fakes import FakeCommunityClient, FakeFeedSource

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used by the processor clock."""
    return NOW


@pytest.fixture
def clock(now: datetime):
    return lambda: now


@pytest.fixture
def community() -> FakeCommunityClient:
    return FakeCommunityClient()


@pytest.fixture
def failing_feed() -> FakeFeedSource:
    return FakeFeedSource(error=FetchError("Feed request timed out for https://hnrss.org/frontpage"))


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""

    base = Settings(_env_file=None)
    listing = ListingSettings(retries=1, retry_base_delay=0.0)
    mirror = MirrorSettings(recency_window_hours=48, max_errors=3)
    reddit = base.reddit.model_copy(
        update={
            "client_id": "test-client",
            "client_secret": "test-secret",
            "password": "test-password",
            "write_interval_seconds": 0.0,
        }
    )
    return base.model_copy(update={"listing": listing, "mirror": mirror, "reddit": reddit})
