"""Named rejections raised by the tracker core.

Every invalid input path ends in one of these. They are transport-agnostic: the
HTTP layer decides which status code each kind maps to.
"""

from __future__ import annotations

from typing import ClassVar


class IssueTrackerError(Exception):
    """Base class for expected, caller-recoverable tracker errors."""

    kind: ClassVar[str] = "IssueTrackerError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TitleRequired(IssueTrackerError):
    kind = "TitleRequired"

    def __init__(self) -> None:
        super().__init__("Title is required")


class UnknownUser(IssueTrackerError):
    kind = "UnknownUser"

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} does not exist")
        self.user_id = user_id


class InvalidStatus(IssueTrackerError):
    kind = "InvalidStatus"

    def __init__(self, raw: object) -> None:
        super().__init__(f"Invalid status: {raw!r}")
        self.raw = raw


class AssigneeRequiredForStatus(IssueTrackerError):
    kind = "AssigneeRequiredForStatus"

    def __init__(self, status: str) -> None:
        super().__init__(f"Status {status} requires an assignee")
        self.status = status


class IssueTerminal(IssueTrackerError):
    kind = "IssueTerminal"

    def __init__(self, issue_id: int, status: str) -> None:
        super().__init__(f"Issue {issue_id} is {status} and can no longer be modified")
        self.issue_id = issue_id
        self.status = status


class IssueNotFound(IssueTrackerError):
    kind = "IssueNotFound"

    def __init__(self, issue_id: int) -> None:
        super().__init__(f"Issue {issue_id} does not exist")
        self.issue_id = issue_id


__all__ = [
    "AssigneeRequiredForStatus",
    "InvalidStatus",
    "IssueNotFound",
    "IssueTerminal",
    "IssueTrackerError",
    "TitleRequired",
    "UnknownUser",
]
