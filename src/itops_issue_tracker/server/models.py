"""Pydantic models for the REST server."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from itops_issue_tracker.tracker.lifecycle import CreateIntent, Issue, IssueStatus, PatchIntent
from itops_issue_tracker.tracker.users import User

# 0 is meaningful on PATCH (unassign), so only negatives are rejected here.
UserId = Annotated[int, Field(strict=True, ge=0)]

_USER_ID_ALIASES = AliasChoices("userId", "assigneeId")


class CreateIssueRequest(BaseModel):
    # JSON null is the same as a missing field; both become "".
    title: str | None = None
    description: str | None = None
    user_id: UserId | None = Field(default=None, validation_alias=_USER_ID_ALIASES)
    status: str | None = None

    def to_intent(self) -> CreateIntent:
        return CreateIntent(
            title=self.title or "",
            description=self.description or "",
            assignee_id=self.user_id,
            status=self.status,
        )


class PatchIssueRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    user_id: UserId | None = Field(default=None, validation_alias=_USER_ID_ALIASES)
    status: str | None = None

    def to_intent(self) -> PatchIntent:
        return PatchIntent(
            title=self.title,
            description=self.description,
            assignee_id=self.user_id,
            status=self.status,
        )


class ApiUser(BaseModel):
    id: int
    name: str

    @classmethod
    def from_user(cls, user: User) -> ApiUser:
        return cls(id=user.id, name=user.name)


class ApiIssue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    status: IssueStatus
    user: ApiUser | None = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_issue(cls, issue: Issue, assignee: User | None) -> ApiIssue:
        return cls(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            status=issue.status,
            user=ApiUser.from_user(assignee) if assignee is not None else None,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )


class IssueListResponse(BaseModel):
    issues: list[ApiIssue] = Field(default_factory=list)


class UserListResponse(BaseModel):
    users: list[ApiUser] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    code: int
    kind: str
