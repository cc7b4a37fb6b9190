"""Unit tests for flattening an activated context into prompt inputs."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from event_payloads import (
    issue_comment_payload,
    issue_payload,
    pull_request_payload,
    review_comment_payload,
    review_payload,
)

from github_agent_trigger.trigger.context import NormalizedContext
from github_agent_trigger.trigger.prepare import (
    RequiredFieldMissing,
    derive_working_branch,
    prepare_context,
)

MakeContext = Callable[..., NormalizedContext]


def test_issue_comment_on_issue(make_context: MakeContext) -> None:
    ctx = make_context("issue_comment", issue_comment_payload(number=67890))

    result = prepare_context(ctx, "12345", "main", "claude/issue-67890-20240101_120000")

    assert result.repository == "test-owner/test-repo"
    assert result.tracking_comment_id == "12345"
    assert result.trigger_phrase == "@claude"
    assert result.trigger_username == "contributor-user"
    data = result.event_data
    assert data.event_name == "issue_comment"
    assert data.is_pr is False
    assert data.issue_number == "67890"
    assert data.comment_id == "12345678"
    assert data.base_branch == "main"
    assert data.working_branch == "claude/issue-67890-20240101_120000"
    assert data.comment_body == (
        "@claude can you help explain how to configure the logging system?"
    )


def test_issue_comment_on_issue_requires_working_branch(make_context: MakeContext) -> None:
    ctx = make_context("issue_comment", issue_comment_payload())

    with pytest.raises(
        RequiredFieldMissing, match="CLAUDE_BRANCH is required for issue_comment event"
    ):
        prepare_context(ctx, "12345", "main")


def test_issue_comment_on_issue_requires_base_branch(make_context: MakeContext) -> None:
    ctx = make_context("issue_comment", issue_comment_payload())

    with pytest.raises(RequiredFieldMissing) as excinfo:
        prepare_context(ctx, "12345", None, "claude/issue-55-20240101_120000")

    assert str(excinfo.value) == "BASE_BRANCH is required for issue_comment event"
    assert excinfo.value.field_name == "BASE_BRANCH"


def test_base_branch_defaults_to_config(make_context: MakeContext) -> None:
    ctx = make_context("issue_comment", issue_comment_payload(), base_branch="develop")

    result = prepare_context(ctx, "12345", working_branch="claude/issue-55-x")

    assert result.event_data.base_branch == "develop"


def test_issue_comment_on_pr_needs_no_branches(make_context: MakeContext) -> None:
    payload = issue_comment_payload(
        number=789, comment_id=87654321, author="reviewer-user", on_pr=True
    )
    ctx = make_context("issue_comment", payload)

    result = prepare_context(ctx, "12345")

    assert result.trigger_username == "reviewer-user"
    assert result.event_data.is_pr is True
    assert result.event_data.pr_number == "789"
    assert result.event_data.comment_id == "87654321"
    assert result.event_data.base_branch is None


def test_pull_request_review(make_context: MakeContext) -> None:
    ctx = make_context("pull_request_review", review_payload(number=321))

    result = prepare_context(ctx, "12345")

    assert result.trigger_username == "senior-developer"
    assert result.event_data.event_name == "pull_request_review"
    assert result.event_data.pr_number == "321"
    assert result.event_data.comment_body is not None
    assert result.event_data.comment_body.startswith("@claude can you check")


def test_pull_request_review_comment(make_context: MakeContext) -> None:
    ctx = make_context("pull_request_review_comment", review_comment_payload())

    result = prepare_context(ctx, "12345")

    assert result.trigger_username == "code-reviewer"
    assert result.event_data.pr_number == "999"
    assert result.event_data.comment_id == "99988877"


def test_pull_request_keeps_action(make_context: MakeContext) -> None:
    ctx = make_context("pull_request", pull_request_payload(action="synchronize"))

    result = prepare_context(ctx, "12345")

    assert result.trigger_username == "pr-author"
    assert result.event_data.event_action == "synchronize"
    assert result.event_data.pr_number == "321"


def test_issue_opened(make_context: MakeContext) -> None:
    ctx = make_context("issues", issue_payload(number=42))

    result = prepare_context(ctx, "12345", "main", "claude/issue-42-20240101_120000")

    assert result.trigger_username == "john-doe"
    assert result.event_data.event_action == "opened"
    assert result.event_data.issue_number == "42"
    assert result.event_data.assignee_trigger is None


def test_issue_assigned_carries_assignee_trigger(make_context: MakeContext) -> None:
    payload = issue_payload(action="assigned", number=123, author="jane-smith")
    ctx = make_context("issues", payload, assignee_trigger="@claude-bot")

    result = prepare_context(ctx, "12345", "main", "claude/issue-123-20240101_120000")

    assert result.trigger_username == "jane-smith"
    assert result.event_data.assignee_trigger == "@claude-bot"


def test_issue_labeled_carries_label(make_context: MakeContext) -> None:
    payload = issue_payload(action="labeled", label={"name": "claude-auto-fix"})
    ctx = make_context("issues", payload)

    result = prepare_context(ctx, "12345", "main", "claude/issue-42-x")

    assert result.event_data.label_trigger == "claude-auto-fix"


@pytest.mark.parametrize(
    ("base", "working", "missing"),
    [("main", None, "CLAUDE_BRANCH"), (None, "claude/issue-42-x", "BASE_BRANCH")],
)
def test_issues_require_branches(
    make_context: MakeContext, base: str | None, working: str | None, missing: str
) -> None:
    ctx = make_context("issues", issue_payload())

    with pytest.raises(RequiredFieldMissing, match=f"{missing} is required for issues event"):
        prepare_context(ctx, "12345", base, working)


def test_unsupported_issue_action(make_context: MakeContext) -> None:
    ctx = make_context("issues", issue_payload(action="closed"))

    with pytest.raises(ValueError, match="Unsupported issue action: closed"):
        prepare_context(ctx, "12345", "main", "claude/issue-42-x")


def test_dispatch_events(make_context: MakeContext) -> None:
    workflow = make_context("workflow_dispatch", {"inputs": {"pr_number": "7"}})
    repository = make_context("repository_dispatch", {"client_payload": {"issue_number": 8}})

    wf = prepare_context(workflow, "1", "main").event_data
    rd = prepare_context(repository, "1", "main", "claude/issue-8-x").event_data

    assert (wf.is_pr, wf.pr_number, wf.issue_number) == (True, "7", None)
    assert (rd.is_pr, rd.pr_number, rd.issue_number) == (False, None, "8")
    assert rd.working_branch == "claude/issue-8-x"


def test_tools_and_instructions_are_passed_through(make_context: MakeContext) -> None:
    ctx = make_context(
        "issue_comment",
        issue_comment_payload(on_pr=True),
        allowed_tools=("Tool1", "Tool2"),
        disallowed_tools=("WebFetch",),
        custom_instructions="Be concise",
    )

    result = prepare_context(ctx, "12345")

    assert result.allowed_tools == "Tool1,Tool2"
    assert result.disallowed_tools == "WebFetch"
    assert result.custom_instructions == "Be concise"


def test_to_outputs_is_flat_strings(make_context: MakeContext) -> None:
    ctx = make_context("pull_request_review_comment", review_comment_payload())

    outputs = prepare_context(ctx, "12345").to_outputs()

    assert outputs["event_name"] == "pull_request_review_comment"
    assert outputs["is_pr"] == "true"
    assert outputs["pr_number"] == "999"
    assert outputs["comment_id"] == "99988877"
    assert outputs["tracking_comment_id"] == "12345"
    assert "issue_number" not in outputs
    assert all(isinstance(v, str) for v in outputs.values())


def test_comment_without_id_leaves_comment_id_unset(make_context: MakeContext) -> None:
    payload = review_comment_payload()
    del payload["comment"]["id"]
    ctx = make_context("pull_request_review_comment", payload)

    result = prepare_context(ctx, "12345")

    assert result.event_data.comment_id is None
    assert "comment_id" not in result.to_outputs()


def test_trigger_username_falls_back_to_actor(make_context: MakeContext) -> None:
    ctx = make_context("workflow_dispatch", {"inputs": {"pr_number": "7"}}, actor="octocat")

    assert prepare_context(ctx, "1").trigger_username == "octocat"


def test_derive_working_branch(make_context: MakeContext) -> None:
    now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
    issue_ctx = make_context("issues", issue_payload(number=42))
    pr_ctx = make_context("pull_request", pull_request_payload(number=321))

    assert derive_working_branch(issue_ctx, now=now) == "claude/issue-42-20240101_120000"
    assert derive_working_branch(pr_ctx, now=now, prefix="bot/") == "bot/pr-321-20240101_120000"
