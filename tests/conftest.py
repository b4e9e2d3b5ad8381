# tests/conftest.py - shared fixtures
import threading
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from repo_lister.domain.fetcher import FetchError
from repo_lister.domain.repository import Owner, RepositoryRecord


def make_repo(full_name: str, language: str = "", year: int = 2020, month: int = 1,
              description: str = "", avatar_url: str = "https://avatars.example/org") -> RepositoryRecord:
    return RepositoryRecord(
        full_name=full_name,
        description=description,
        language=language,
        created_at=datetime(year, month, 1, tzinfo=timezone.utc),
        owner=Owner(avatar_url=avatar_url),
    )


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta):
        self.now += delta


class FakeFetcher:
    """Upstream fetcher returning queued results and counting calls."""

    def __init__(self, records: Optional[List[RepositoryRecord]] = None):
        self.records = list(records or [])
        self.fail = False
        self.error: Optional[Exception] = None
        self.calls = 0
        self.release = threading.Event()
        self.release.set()
        self.started = threading.Event()
        self._lock = threading.Lock()

    def fetch(self) -> List[RepositoryRecord]:
        with self._lock:
            self.calls += 1
        self.started.set()
        # Tests clear `release` to hold the fetch in flight
        self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        if self.fail:
            raise FetchError("GitHub returned status 503", status_code=503)
        return list(self.records)


@pytest.fixture
def sample_repos() -> List[RepositoryRecord]:
    """The three-repository organization used across tests."""
    return [
        make_repo("org/a", language="Go", year=2020, description="Service A"),
        make_repo("org/b", language="Go", year=2019),
        make_repo("org/c", language="Rust", year=2021),
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher(sample_repos) -> FakeFetcher:
    return FakeFetcher(sample_repos)


@pytest.fixture
def repo_factory():
    """Build a RepositoryRecord with defaults for unimportant fields."""
    return make_repo
