"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from itops_issue_tracker.server.app import create_app
from itops_issue_tracker.server.config import ServerSettings
from itops_issue_tracker.tracker.service import IssueService
from itops_issue_tracker.tracker.store import IssueStore
from itops_issue_tracker.tracker.users import UserDirectory


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def users() -> UserDirectory:
    """Provide the seeded user directory."""
    return UserDirectory.default()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 1, tzinfo=UTC))


@pytest.fixture
def store() -> IssueStore:
    """Provide an empty store per test."""
    return IssueStore()


@pytest.fixture
def service(store: IssueStore, users: UserDirectory, clock: FakeClock) -> IssueService:
    return IssueService(store=store, users=users, clock=clock)


@pytest.fixture
def client(service: IssueService) -> Iterator[TestClient]:
    settings = ServerSettings(_env_file=None)
    with TestClient(create_app(settings, service)) as test_client:
        yield test_client
