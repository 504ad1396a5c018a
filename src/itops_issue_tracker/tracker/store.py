"""In-memory issue store.

The issue mapping and the id counter are one shared resource behind a single
lock. ``create`` and ``update`` hold it for their whole duration, including the
mutation passed to ``update``; reads hold it only long enough to copy.
State lives for the lifetime of the process.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from itops_issue_tracker.tracker.errors import IssueNotFound
from itops_issue_tracker.tracker.lifecycle import Issue, IssueDraft, IssueStatus, parse_status

Mutation = Callable[[Issue], Issue]


class IssueStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issues: dict[int, Issue] = {}
        self._next_id = 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)

    def create(self, draft: IssueDraft) -> Issue:
        with self._lock:
            issue = Issue.from_draft(self._next_id, draft)
            self._next_id += 1
            self._issues[issue.id] = issue
            return issue

    def get(self, issue_id: int) -> Issue:
        with self._lock:
            issue = self._issues.get(issue_id)
        if issue is None:
            raise IssueNotFound(issue_id)
        return issue

    def list(self, status: IssueStatus | str | None = None) -> list[Issue]:
        wanted = parse_status(status) if status is not None else None
        with self._lock:
            issues = list(self._issues.values())
        if wanted is None:
            return issues
        return [issue for issue in issues if issue.status is wanted]

    def update(self, issue_id: int, mutation: Mutation) -> Issue:
        """Apply ``mutation`` to the stored issue atomically.

        If ``mutation`` raises, the stored issue is left untouched and the
        exception propagates.
        """

        with self._lock:
            current = self._issues.get(issue_id)
            if current is None:
                raise IssueNotFound(issue_id)
            candidate = mutation(current)
            if candidate.id != issue_id:
                raise ValueError(
                    f"Mutation changed issue id from {issue_id} to {candidate.id}"
                )
            self._issues[issue_id] = candidate
            return candidate
