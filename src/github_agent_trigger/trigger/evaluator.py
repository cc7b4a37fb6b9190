"""Decide whether the bot should activate for a normalized event.

Rules are checked in a fixed priority order and the first one that matches
wins:

1. direct prompt configured
2. workflow_dispatch (PR number, then prompt)
3. repository_dispatch (PR number, then issue number, then prompt)
4. issue assigned to the assignee trigger
5. issue labeled with a label trigger
6. issue opened with the trigger phrase in body or title
7. pull request with the trigger phrase in body or title
8. review submitted/edited with the trigger phrase in its body
9. issue or review comment with the trigger phrase in its body

Evaluation is pure: it reads only the context and the fallbacks passed in, and
reports its reasoning in :attr:`TriggerDecision.rationale` for the caller to log.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .context import NormalizedContext
from .events import (
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    RepositoryDispatchEvent,
    WorkflowDispatchEvent,
)
from .matching import contains_trigger_phrase

REVIEW_TRIGGER_ACTIONS: frozenset[str] = frozenset({"submitted", "edited"})


@dataclass(frozen=True, slots=True)
class TriggerDecision:
    activated: bool
    rationale: str


@dataclass(frozen=True, slots=True)
class DispatchFallback:
    """One lookup source consulted when workflow_dispatch inputs lack a value.

    Typical sources, in order: the action's own `pr_number`/`prompt` inputs, then
    the `PR_NUMBER`/`PROMPT` environment overrides.
    """

    name: str
    pr_number: str | None = None
    prompt: str | None = None


def _first_present(
    structured: object, fallbacks: Sequence[DispatchFallback], attr: str
) -> tuple[object, str] | None:
    if structured:
        return structured, "inputs"
    for source in fallbacks:
        value = getattr(source, attr)
        if value:
            return value, source.name
    return None


def _check_workflow_dispatch(
    event: WorkflowDispatchEvent, fallbacks: Sequence[DispatchFallback]
) -> TriggerDecision:
    inputs = event.inputs
    pr = _first_present(inputs.pr_number if inputs else None, fallbacks, "pr_number")
    if pr is not None:
        return TriggerDecision(True, f"Workflow dispatch triggered for PR #{pr[0]} (from {pr[1]})")

    prompt = _first_present(inputs.prompt if inputs else None, fallbacks, "prompt")
    if prompt is not None:
        return TriggerDecision(True, f"Workflow dispatch with direct prompt (from {prompt[1]})")

    return TriggerDecision(
        False, "Workflow dispatch triggered but no PR number or prompt provided"
    )


def _check_repository_dispatch(event: RepositoryDispatchEvent) -> TriggerDecision:
    client = event.client_payload
    if client is not None:
        if client.pr_number:
            return TriggerDecision(
                True, f"Repository dispatch triggered for PR #{client.pr_number}"
            )
        if client.issue_number:
            return TriggerDecision(
                True, f"Repository dispatch triggered for issue #{client.issue_number}"
            )
        if client.prompt:
            return TriggerDecision(True, "Repository dispatch with direct prompt")

    return TriggerDecision(
        False,
        "Repository dispatch triggered but no PR number, issue number or prompt provided",
    )


def _check_issue_event(
    event: IssuesEvent, action: str | None, context: NormalizedContext
) -> TriggerDecision | None:
    config = context.config
    phrase = config.trigger_phrase

    if action == "assigned":
        trigger_user = config.assignee_trigger.removeprefix("@")
        assignee = event.assignee or event.issue.assignee
        assignee_login = assignee.login if assignee else ""
        if trigger_user and assignee_login == trigger_user:
            return TriggerDecision(True, f"Issue assigned to trigger user '{trigger_user}'")

    elif action == "labeled":
        label_name = event.label.name if event.label and event.label.name else ""
        if config.label_triggers and label_name in config.label_triggers:
            return TriggerDecision(
                True,
                f"Issue labeled with trigger label '{label_name}' "
                f"(from trigger list: [{', '.join(config.label_triggers)}])",
            )

    elif action == "opened":
        if contains_trigger_phrase(event.issue.body, phrase):
            return TriggerDecision(True, f"Issue body contains exact trigger phrase '{phrase}'")
        if contains_trigger_phrase(event.issue.title, phrase):
            return TriggerDecision(True, f"Issue title contains exact trigger phrase '{phrase}'")

    return None


def evaluate_trigger(
    context: NormalizedContext, *, fallbacks: Sequence[DispatchFallback] = ()
) -> TriggerDecision:
    """Return whether the bot should activate for `context`, and why.

    Never raises for a supported event: missing optional text (body, title,
    label, assignee) simply fails to match.
    """

    config = context.config
    phrase = config.trigger_phrase
    event = context.payload
    action = context.event_action

    if config.direct_prompt:
        return TriggerDecision(True, "Direct prompt provided, triggering action")

    if isinstance(event, WorkflowDispatchEvent):
        return _check_workflow_dispatch(event, fallbacks)

    if isinstance(event, RepositoryDispatchEvent):
        return _check_repository_dispatch(event)

    if isinstance(event, IssuesEvent):
        decision = _check_issue_event(event, action, context)
        if decision is not None:
            return decision

    elif isinstance(event, PullRequestEvent):
        if contains_trigger_phrase(event.pull_request.body, phrase):
            return TriggerDecision(
                True, f"Pull request body contains exact trigger phrase '{phrase}'"
            )
        if contains_trigger_phrase(event.pull_request.title, phrase):
            return TriggerDecision(
                True, f"Pull request title contains exact trigger phrase '{phrase}'"
            )

    elif isinstance(event, PullRequestReviewEvent):
        # Dismissed reviews are never a trigger source.
        if action in REVIEW_TRIGGER_ACTIONS and contains_trigger_phrase(
            event.review.body, phrase
        ):
            return TriggerDecision(
                True, f"Pull request review contains exact trigger phrase '{phrase}'"
            )

    elif isinstance(event, (IssueCommentEvent, PullRequestReviewCommentEvent)):
        if contains_trigger_phrase(event.comment.body, phrase):
            return TriggerDecision(True, f"Comment contains exact trigger phrase '{phrase}'")

    return TriggerDecision(False, f"No trigger was met for {phrase}")
