from datetime import datetime, timedelta, timezone

import pytest

from cacher.core.cache import CacheStore, reset_store
from cacher.core.schemas import CacheSettings


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float = 0, seconds: float = 0) -> None:
        self.now += timedelta(minutes=minutes, seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return CacheStore(time_func=clock)


@pytest.fixture
def purging_store(clock):
    return CacheStore(CacheSettings(purge_expired_on_miss=True), time_func=clock)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the real environment and any .env in the cwd."""
    for name in (
        "CACHER_DEFAULT_MINUTES",
        "CACHER_SLIDING_EXPIRATION",
        "CACHER_PURGE_EXPIRED_ON_MISS",
        "CACHER_LOG_LEVEL",
    ):
        # setenv first so teardown also removes values a .env file loaded
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_store()
    yield tmp_path
    reset_store()
