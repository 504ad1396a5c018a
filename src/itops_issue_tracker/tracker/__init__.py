"""Issue tracker core: users, lifecycle rules, store and service."""

from __future__ import annotations

from itops_issue_tracker.tracker.errors import IssueTrackerError
from itops_issue_tracker.tracker.lifecycle import (
    CreateIntent,
    Issue,
    IssueStatus,
    PatchIntent,
)
from itops_issue_tracker.tracker.service import IssueService
from itops_issue_tracker.tracker.store import IssueStore
from itops_issue_tracker.tracker.users import User, UserDirectory

__all__ = [
    "CreateIntent",
    "Issue",
    "IssueService",
    "IssueStatus",
    "IssueStore",
    "IssueTrackerError",
    "PatchIntent",
    "User",
    "UserDirectory",
]
