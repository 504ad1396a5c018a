"""Unit tests for IssueService: lifecycle rules wired to the store."""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from itops_issue_tracker.tracker.errors import (
    AssigneeRequiredForStatus,
    InvalidStatus,
    IssueNotFound,
    IssueTerminal,
    IssueTrackerError,
)
from itops_issue_tracker.tracker.lifecycle import (
    ASSIGNED_ONLY_STATUSES,
    CreateIntent,
    IssueStatus,
    PatchIntent,
)
from itops_issue_tracker.tracker.service import IssueService
from itops_issue_tracker.tracker.store import IssueStore


def test_scenario_create_without_assignee(service: IssueService) -> None:
    issue = service.create_issue(CreateIntent(title="T", description="D"))

    assert issue.status is IssueStatus.PENDING
    assert issue.assignee_id is None
    assert service.assignee_of(issue) is None


def test_scenario_create_with_assignee(service: IssueService) -> None:
    issue = service.create_issue(CreateIntent(title="T", assignee_id=1))

    assert issue.status is IssueStatus.IN_PROGRESS
    assignee = service.assignee_of(issue)
    assert assignee is not None
    assert assignee.id == 1


def test_scenario_create_in_progress_without_assignee(
    service: IssueService, store: IssueStore
) -> None:
    with pytest.raises(AssigneeRequiredForStatus):
        service.create_issue(CreateIntent(title="T", status="IN_PROGRESS"))
    assert len(store) == 0


def test_scenario_assign_pending_issue(service: IssueService) -> None:
    created = service.create_issue(CreateIntent(title="T", description="D"))

    updated = service.update_issue(created.id, PatchIntent(assignee_id=2))

    assert updated.status is IssueStatus.IN_PROGRESS
    assert updated.assignee_id == 2
    assert updated.updated_at > created.updated_at
    assert updated.created_at == created.created_at


def test_scenario_patch_completed_issue(service: IssueService) -> None:
    created = service.create_issue(CreateIntent(title="T", assignee_id=1, status="COMPLETED"))

    with pytest.raises(IssueTerminal):
        service.update_issue(created.id, PatchIntent(title="X"))

    assert service.get_issue(created.id) == created


def test_scenario_patch_unknown_status(service: IssueService) -> None:
    created = service.create_issue(CreateIntent(title="T", assignee_id=1))

    with pytest.raises(InvalidStatus):
        service.update_issue(created.id, PatchIntent(status="UNKNOWN"))

    assert service.get_issue(created.id) == created


def test_rejected_patch_leaves_title_untouched(service: IssueService) -> None:
    created = service.create_issue(CreateIntent(title="T"))

    with pytest.raises(AssigneeRequiredForStatus):
        service.update_issue(created.id, PatchIntent(title="New", status="COMPLETED"))

    assert service.get_issue(created.id).title == "T"


def test_update_unknown_issue(service: IssueService) -> None:
    with pytest.raises(IssueNotFound):
        service.update_issue(1, PatchIntent(title="X"))


def test_list_issues_filter(service: IssueService) -> None:
    service.create_issue(CreateIntent(title="a"))
    service.create_issue(CreateIntent(title="b", assignee_id=3))

    assert [i.title for i in service.list_issues()] == ["a", "b"]
    assert [i.title for i in service.list_issues("")] == ["a", "b"]
    assert [i.title for i in service.list_issues("IN_PROGRESS")] == ["b"]
    with pytest.raises(InvalidStatus):
        service.list_issues("nope")


def test_create_and_update_are_logged(
    service: IssueService, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="itops_issue_tracker")

    issue = service.create_issue(CreateIntent(title="T"))
    service.update_issue(issue.id, PatchIntent(assignee_id=1))

    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["Issue created", "Issue updated"]
    assert caplog.records[1].status == "IN_PROGRESS"
    assert caplog.records[1].assignee_id == 1


def test_random_operation_sequences_preserve_invariants(service: IssueService) -> None:
    rng = random.Random(1234)
    statuses = [s.value for s in IssueStatus] + ["BOGUS"]
    assignees = [None, 0, 1, 2, 3, 9]

    for _ in range(20):
        service.create_issue(CreateIntent(title="seed", assignee_id=rng.choice([None, 1])))

    for step in range(2000):
        if rng.random() < 0.1:
            intent = CreateIntent(
                title=rng.choice(["", "t"]),
                assignee_id=rng.choice([None, 1, 2, 9]),
                status=rng.choice([None, *statuses]),
            )
            try:
                service.create_issue(intent)
            except IssueTrackerError:
                pass
            continue

        issue_id = rng.randint(1, len(service.list_issues()) + 1)
        try:
            before = service.get_issue(issue_id)
        except IssueNotFound:
            before = None
        patch = PatchIntent(
            title=rng.choice([None, f"title-{step}"]),
            assignee_id=rng.choice(assignees),
            status=rng.choice([None, *statuses]),
        )
        try:
            service.update_issue(issue_id, patch)
        except IssueTerminal:
            assert before is not None and before.is_terminal
            assert service.get_issue(issue_id) == before
        except IssueTrackerError:
            if before is not None:
                assert service.get_issue(issue_id) == before

    for issue in service.list_issues():
        if issue.assignee_id is None:
            assert issue.status not in ASSIGNED_ONLY_STATUSES
        assert issue.updated_at >= issue.created_at


def test_concurrent_patches_apply_in_some_sequential_order(service: IssueService) -> None:
    created = service.create_issue(CreateIntent(title="T"))

    patches = [
        PatchIntent(title="from-a", assignee_id=1),
        PatchIntent(description="from-b", assignee_id=2, status="PENDING"),
    ]
    with ThreadPoolExecutor(max_workers=2) as pool:
        list(pool.map(lambda p: service.update_issue(created.id, p), patches))

    final = service.get_issue(created.id)
    # a then b -> (2, PENDING); b then a -> a promotes the PENDING issue.
    assert (final.assignee_id, final.status) in {
        (2, IssueStatus.PENDING),
        (1, IssueStatus.IN_PROGRESS),
    }
    assert final.title == "from-a"
    assert final.description == "from-b"


def test_many_concurrent_title_patches_keep_one_consistent_state(service: IssueService) -> None:
    created = service.create_issue(CreateIntent(title="T"))

    def patch(n: int) -> None:
        service.update_issue(created.id, PatchIntent(title=f"t{n}", description=f"d{n}"))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(patch, range(200)))

    final = service.get_issue(created.id)
    assert final.title[1:] == final.description[1:]
