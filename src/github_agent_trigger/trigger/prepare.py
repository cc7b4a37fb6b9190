"""Flatten an activated context into the record used to build the prompt.

The record is deliberately flat (strings and booleans only) so it can be written
straight to the runner's outputs or rendered into a prompt template.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .context import NormalizedContext
from .events import (
    GitHubUser,
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    RepositoryDispatchEvent,
    WorkflowDispatchEvent,
)

DEFAULT_BRANCH_PREFIX = "claude/"

# Runtime variable names reported when a required branch is missing.
BASE_BRANCH_FIELD = "BASE_BRANCH"
WORKING_BRANCH_FIELD = "CLAUDE_BRANCH"


class RequiredFieldMissing(ValueError):
    def __init__(self, field_name: str, event_name: str) -> None:
        super().__init__(f"{field_name} is required for {event_name} event")
        self.field_name = field_name
        self.event_name = event_name


@dataclass(frozen=True, slots=True)
class EventData:
    """Per-event fields. Only the fields relevant to `event_name` are set."""

    event_name: str
    is_pr: bool
    event_action: str | None = None
    pr_number: str | None = None
    issue_number: str | None = None
    comment_id: str | None = None
    comment_body: str | None = None
    base_branch: str | None = None
    working_branch: str | None = None
    assignee_trigger: str | None = None
    label_trigger: str | None = None


@dataclass(frozen=True, slots=True)
class PreparedContext:
    repository: str
    tracking_comment_id: str
    trigger_phrase: str
    trigger_username: str
    custom_instructions: str
    allowed_tools: str
    disallowed_tools: str
    direct_prompt: str
    event_data: EventData

    def to_outputs(self) -> dict[str, str]:
        """Flatten into `name -> value` pairs, skipping unset event fields."""

        out: dict[str, str] = {}
        for key, value in asdict(self).items():
            if key == "event_data":
                continue
            out[key] = value
        for key, value in asdict(self.event_data).items():
            if value is None:
                continue
            out[key] = str(value).lower() if isinstance(value, bool) else value
        return out


def derive_working_branch(
    context: NormalizedContext,
    *,
    now: datetime | None = None,
    prefix: str = DEFAULT_BRANCH_PREFIX,
) -> str:
    """Name the branch the bot works on, e.g. `claude/issue-42-20240101_120000`."""

    stamp = (now or datetime.now(tz=UTC)).strftime("%Y%m%d_%H%M%S")
    kind = "pr" if context.is_pr else "issue"
    return f"{prefix}{kind}-{context.entity_number}-{stamp}"


def _login(user: GitHubUser | None) -> str | None:
    return user.login if user is not None and user.login else None


def _id_str(value: int | None) -> str | None:
    return str(value) if value is not None else None


def _trigger_username(context: NormalizedContext) -> str:
    event = context.payload
    login: str | None = None
    if isinstance(event, (IssueCommentEvent, PullRequestReviewCommentEvent)):
        login = _login(event.comment.user)
    elif isinstance(event, PullRequestReviewEvent):
        login = _login(event.review.user)
    elif isinstance(event, IssuesEvent):
        login = _login(event.issue.user)
    elif isinstance(event, PullRequestEvent):
        login = _login(event.pull_request.user)
    return login or context.actor


def _require_branches(
    event_name: str, base_branch: str | None, working_branch: str | None
) -> tuple[str, str]:
    if not working_branch:
        raise RequiredFieldMissing(WORKING_BRANCH_FIELD, event_name)
    if not base_branch:
        raise RequiredFieldMissing(BASE_BRANCH_FIELD, event_name)
    return base_branch, working_branch


def _event_data(
    context: NormalizedContext, base_branch: str | None, working_branch: str | None
) -> EventData:
    event = context.payload
    name = context.event_kind.value
    number = str(context.entity_number)

    if isinstance(event, PullRequestReviewCommentEvent):
        return EventData(
            event_name=name,
            is_pr=True,
            pr_number=number,
            comment_id=_id_str(event.comment.id),
            comment_body=event.comment.body or "",
        )

    if isinstance(event, PullRequestReviewEvent):
        return EventData(
            event_name=name,
            is_pr=True,
            pr_number=number,
            comment_body=event.review.body or "",
        )

    if isinstance(event, IssueCommentEvent):
        if context.is_pr:
            return EventData(
                event_name=name,
                is_pr=True,
                pr_number=number,
                comment_id=_id_str(event.comment.id),
                comment_body=event.comment.body or "",
            )
        base, working = _require_branches(name, base_branch, working_branch)
        return EventData(
            event_name=name,
            is_pr=False,
            issue_number=number,
            comment_id=_id_str(event.comment.id),
            comment_body=event.comment.body or "",
            base_branch=base,
            working_branch=working,
        )

    if isinstance(event, PullRequestEvent):
        return EventData(
            event_name=name,
            is_pr=True,
            event_action=context.event_action,
            pr_number=number,
        )

    if isinstance(event, IssuesEvent):
        action = context.event_action
        if action not in ("opened", "assigned", "labeled"):
            raise ValueError(f"Unsupported issue action: {action}")
        base, working = _require_branches(name, base_branch, working_branch)
        return EventData(
            event_name=name,
            is_pr=False,
            event_action=action,
            issue_number=number,
            base_branch=base,
            working_branch=working,
            assignee_trigger=context.config.assignee_trigger if action == "assigned" else None,
            label_trigger=(
                event.label.name if action == "labeled" and event.label is not None else None
            ),
        )

    if isinstance(event, RepositoryDispatchEvent):
        client = event.client_payload
        issue_number = client.issue_number if client is not None else None
        return EventData(
            event_name=name,
            is_pr=context.is_pr,
            pr_number=number if context.is_pr and context.entity_number else None,
            issue_number=str(issue_number) if issue_number and not context.is_pr else None,
            base_branch=base_branch,
            working_branch=working_branch,
        )

    if isinstance(event, WorkflowDispatchEvent):
        return EventData(
            event_name=name,
            is_pr=context.is_pr,
            pr_number=number if context.entity_number else None,
            base_branch=base_branch,
            working_branch=working_branch,
        )

    raise ValueError(f"Unsupported event type: {name}")


def prepare_context(
    context: NormalizedContext,
    tracking_comment_id: str,
    base_branch: str | None = None,
    working_branch: str | None = None,
) -> PreparedContext:
    """Build the flat prompt-preparation record for an activated event.

    `base_branch` defaults to the configured base branch.

    Raises:
        RequiredFieldMissing: if an issue-scoped event (`issues`, or
            `issue_comment` on an issue) has no working branch or base branch.
    """

    config = context.config
    event_data = _event_data(context, base_branch or config.base_branch, working_branch)

    return PreparedContext(
        repository=context.repository_full_name,
        tracking_comment_id=tracking_comment_id,
        trigger_phrase=config.trigger_phrase,
        trigger_username=_trigger_username(context),
        custom_instructions=config.custom_instructions,
        allowed_tools=",".join(config.allowed_tools),
        disallowed_tools=",".join(config.disallowed_tools),
        direct_prompt=config.direct_prompt,
        event_data=event_data,
    )
