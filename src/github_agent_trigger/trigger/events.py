"""Typed views over the seven supported GitHub event payloads.

Each event kind gets its own model carrying only the fields the trigger rules
and context preparation read. Unknown keys are ignored, so a full webhook
payload validates as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class EventKind(str, Enum):
    ISSUES = "issues"
    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    WORKFLOW_DISPATCH = "workflow_dispatch"
    REPOSITORY_DISPATCH = "repository_dispatch"


class UnsupportedEventKind(ValueError):
    """Raised for an event name outside the supported set."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported event type: {kind}")
        self.kind = kind


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class GitHubUser(_Payload):
    login: str = ""


class GitHubLabel(_Payload):
    name: str | None = None


class GitHubIssue(_Payload):
    number: int
    title: str | None = None
    body: str | None = None
    user: GitHubUser | None = None
    assignee: GitHubUser | None = None
    # Present (possibly empty) only when the issue is actually a pull request.
    pull_request: Any = None


class GitHubPullRequest(_Payload):
    number: int
    title: str | None = None
    body: str | None = None
    user: GitHubUser | None = None


class GitHubComment(_Payload):
    id: int | None = None
    body: str | None = None
    user: GitHubUser | None = None


class GitHubReview(_Payload):
    id: int | None = None
    body: str | None = None
    user: GitHubUser | None = None


class WorkflowDispatchInputs(_Payload):
    """`inputs` of a workflow_dispatch event.

    Values normally arrive as strings but are kept untyped: callers coerce them.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    pr_number: Any = None
    is_pr: Any = None
    prompt: Any = None


class RepositoryDispatchClientPayload(_Payload):
    """`client_payload` of a repository_dispatch event. Shape is caller-defined."""

    model_config = ConfigDict(frozen=True, extra="allow")

    pr_number: Any = None
    issue_number: Any = None
    is_pr: Any = None
    prompt: Any = None


class IssuesEvent(_Payload):
    kind: Literal[EventKind.ISSUES] = EventKind.ISSUES
    action: str | None = None
    issue: GitHubIssue
    label: GitHubLabel | None = None
    assignee: GitHubUser | None = None


class IssueCommentEvent(_Payload):
    kind: Literal[EventKind.ISSUE_COMMENT] = EventKind.ISSUE_COMMENT
    action: str | None = None
    issue: GitHubIssue
    comment: GitHubComment


class PullRequestEvent(_Payload):
    kind: Literal[EventKind.PULL_REQUEST] = EventKind.PULL_REQUEST
    action: str | None = None
    pull_request: GitHubPullRequest


class PullRequestReviewEvent(_Payload):
    kind: Literal[EventKind.PULL_REQUEST_REVIEW] = EventKind.PULL_REQUEST_REVIEW
    action: str | None = None
    pull_request: GitHubPullRequest
    review: GitHubReview


class PullRequestReviewCommentEvent(_Payload):
    kind: Literal[EventKind.PULL_REQUEST_REVIEW_COMMENT] = (
        EventKind.PULL_REQUEST_REVIEW_COMMENT
    )
    action: str | None = None
    pull_request: GitHubPullRequest
    comment: GitHubComment


class WorkflowDispatchEvent(_Payload):
    kind: Literal[EventKind.WORKFLOW_DISPATCH] = EventKind.WORKFLOW_DISPATCH
    inputs: WorkflowDispatchInputs | None = None


class RepositoryDispatchEvent(_Payload):
    kind: Literal[EventKind.REPOSITORY_DISPATCH] = EventKind.REPOSITORY_DISPATCH
    action: str | None = None
    client_payload: RepositoryDispatchClientPayload | None = None


RawEvent = Annotated[
    IssuesEvent
    | IssueCommentEvent
    | PullRequestEvent
    | PullRequestReviewEvent
    | PullRequestReviewCommentEvent
    | WorkflowDispatchEvent
    | RepositoryDispatchEvent,
    Field(discriminator="kind"),
]

_RAW_EVENT_ADAPTER: TypeAdapter[RawEvent] = TypeAdapter(RawEvent)


def parse_event_kind(name: str) -> EventKind:
    try:
        return EventKind(name)
    except ValueError:
        raise UnsupportedEventKind(name) from None


def parse_raw_event(name: str, payload: dict[str, Any]) -> RawEvent:
    """Validate a raw webhook payload against the shape for its event name.

    Raises:
        UnsupportedEventKind: if `name` is not one of the seven supported kinds.
        pydantic.ValidationError: if the payload does not match the kind's shape.
    """

    kind = parse_event_kind(name)
    return _RAW_EVENT_ADAPTER.validate_python({**payload, "kind": kind})
