"""Issue lifecycle rules.

Everything here is a pure function of (current issue, requested change, user
directory, timestamp). Nothing here locks, logs, or reads the clock; the store
and the service take care of that. A rejected change raises one of the
:mod:`itops_issue_tracker.tracker.errors` exceptions and produces no state.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from itops_issue_tracker.tracker.errors import (
    AssigneeRequiredForStatus,
    InvalidStatus,
    IssueTerminal,
    TitleRequired,
)
from itops_issue_tracker.tracker.users import UserDirectory

UNASSIGN = 0


class IssueStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES: frozenset[IssueStatus] = frozenset(
    {IssueStatus.COMPLETED, IssueStatus.CANCELLED}
)

# Statuses an issue may only hold while it has an assignee.
ASSIGNED_ONLY_STATUSES: frozenset[IssueStatus] = frozenset(
    {IssueStatus.IN_PROGRESS, IssueStatus.COMPLETED, IssueStatus.CANCELLED}
)


def parse_status(raw: object) -> IssueStatus:
    if isinstance(raw, IssueStatus):
        return raw
    if not isinstance(raw, str):
        raise InvalidStatus(raw)
    try:
        return IssueStatus(raw)
    except ValueError:
        raise InvalidStatus(raw) from None


def is_terminal(status: IssueStatus) -> bool:
    return status in TERMINAL_STATUSES


@dataclass(frozen=True, slots=True)
class IssueDraft:
    """A validated issue that has not been given an id yet."""

    title: str
    description: str
    status: IssueStatus
    assignee_id: int | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class Issue:
    """A stored issue.

    ``assignee_id`` is a reference into the :class:`UserDirectory`; the user
    itself is resolved when the issue is rendered.
    """

    id: int
    title: str
    description: str
    status: IssueStatus
    assignee_id: int | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_draft(cls, issue_id: int, draft: IssueDraft) -> Issue:
        return cls(
            id=issue_id,
            title=draft.title,
            description=draft.description,
            status=draft.status,
            assignee_id=draft.assignee_id,
            created_at=draft.created_at,
            updated_at=draft.updated_at,
        )

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)


@dataclass(frozen=True, slots=True)
class CreateIntent:
    title: str
    description: str = ""
    assignee_id: int | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class PatchIntent:
    """Partial update. ``None`` means the field was not sent.

    ``assignee_id == 0`` unassigns the issue.
    """

    title: str | None = None
    description: str | None = None
    assignee_id: int | None = None
    status: str | None = None


def plan_create(intent: CreateIntent, users: UserDirectory, *, now: datetime) -> IssueDraft:
    if not intent.title:
        raise TitleRequired()

    # 0 means "no assignee" here, mirroring unassign on patch.
    assignee_id: int | None = None
    if intent.assignee_id not in (None, UNASSIGN):
        assignee_id = users.require(intent.assignee_id).id

    status = IssueStatus.IN_PROGRESS if assignee_id is not None else IssueStatus.PENDING
    if intent.status is not None:
        requested = parse_status(intent.status)
        if requested in ASSIGNED_ONLY_STATUSES and assignee_id is None:
            raise AssigneeRequiredForStatus(requested.value)
        status = requested

    return IssueDraft(
        title=intent.title,
        description=intent.description,
        status=status,
        assignee_id=assignee_id,
        created_at=now,
        updated_at=now,
    )


def plan_patch(issue: Issue, intent: PatchIntent, users: UserDirectory, *, now: datetime) -> Issue:
    """Compute the issue that results from applying ``intent``.

    Assignee changes are evaluated before the explicit status so that a status
    sent in the same request overrides whatever the assignee change derived,
    while still being checked against the assignee it leaves behind.
    """

    if issue.is_terminal:
        raise IssueTerminal(issue.id, issue.status.value)

    title = issue.title if intent.title is None else intent.title
    description = issue.description if intent.description is None else intent.description
    assignee_id = issue.assignee_id
    status = issue.status

    if intent.assignee_id is not None:
        if intent.assignee_id == UNASSIGN:
            assignee_id = None
            status = IssueStatus.PENDING
        else:
            assignee_id = users.require(intent.assignee_id).id
            if status is IssueStatus.PENDING and intent.status is None:
                status = IssueStatus.IN_PROGRESS

    if intent.status is not None:
        requested = parse_status(intent.status)
        if requested in ASSIGNED_ONLY_STATUSES and assignee_id is None:
            raise AssigneeRequiredForStatus(requested.value)
        status = requested

    return dataclasses.replace(
        issue,
        title=title,
        description=description,
        status=status,
        assignee_id=assignee_id,
        updated_at=max(now, issue.updated_at),
    )
