"""High-level, testable issue operations.

The service wires the user directory, the lifecycle rules and the store
together. Handlers receive an instance instead of reaching for module globals,
so every test can start from a fresh store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from itops_issue_tracker.tracker.lifecycle import (
    CreateIntent,
    Issue,
    PatchIntent,
    plan_create,
    plan_patch,
)
from itops_issue_tracker.tracker.store import IssueStore
from itops_issue_tracker.tracker.users import User, UserDirectory

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class IssueService:
    def __init__(
        self,
        *,
        store: IssueStore,
        users: UserDirectory,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._users = users
        self._clock = clock

    @property
    def users(self) -> UserDirectory:
        return self._users

    def create_issue(self, intent: CreateIntent) -> Issue:
        draft = plan_create(intent, self._users, now=self._clock())
        issue = self._store.create(draft)
        logger.info(
            "Issue created",
            extra={
                "issue_id": issue.id,
                "status": issue.status.value,
                "assignee_id": issue.assignee_id,
            },
        )
        return issue

    def get_issue(self, issue_id: int) -> Issue:
        return self._store.get(issue_id)

    def list_issues(self, status: str | None = None) -> list[Issue]:
        # An empty query value means "no filter".
        return self._store.list(status or None)

    def update_issue(self, issue_id: int, intent: PatchIntent) -> Issue:
        # The clock is read inside the critical section so that updated_at
        # follows commit order.
        issue = self._store.update(
            issue_id,
            lambda current: plan_patch(current, intent, self._users, now=self._clock()),
        )
        logger.info(
            "Issue updated",
            extra={
                "issue_id": issue.id,
                "status": issue.status.value,
                "assignee_id": issue.assignee_id,
            },
        )
        return issue

    def assignee_of(self, issue: Issue) -> User | None:
        if issue.assignee_id is None:
            return None
        return self._users.lookup(issue.assignee_id)
