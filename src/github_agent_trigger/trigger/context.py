"""Normalize a raw event into a single context record.

The normalizer is a pure function of its inputs: ambient runtime fields and
configuration are passed in explicitly by the caller (see
:mod:`github_agent_trigger.action.config`), never read from the environment here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .events import (
    EventKind,
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    RawEvent,
    RepositoryDispatchEvent,
    UnsupportedEventKind,
    WorkflowDispatchEvent,
    parse_raw_event,
)

DEFAULT_TRIGGER_PHRASE = "@claude"

_LEADING_INT = re.compile(r"^\s*\+?(\d+)")


def parse_delimited_list(value: str) -> tuple[str, ...]:
    """Split a user-supplied list input.

    Multi-line input is split on newlines, anything else on commas. Elements are
    trimmed and empty elements dropped, so both `"a, b"` and `"a\\nb\\n"` work.
    """

    if not value:
        return ()
    separator = "\n" if "\n" in value else ","
    parts = (p.strip() for p in value.split(separator))
    return tuple(p for p in parts if p)


@dataclass(frozen=True, slots=True)
class TriggerConfig:
    trigger_phrase: str = DEFAULT_TRIGGER_PHRASE
    assignee_trigger: str = ""
    label_triggers: tuple[str, ...] = ()
    allowed_tools: tuple[str, ...] = ()
    disallowed_tools: tuple[str, ...] = ()
    custom_instructions: str = ""
    direct_prompt: str = ""
    base_branch: str | None = None

    @staticmethod
    def from_inputs(
        *,
        trigger_phrase: str = DEFAULT_TRIGGER_PHRASE,
        assignee_trigger: str = "",
        label_trigger: str = "",
        allowed_tools: str = "",
        disallowed_tools: str = "",
        custom_instructions: str = "",
        direct_prompt: str = "",
        base_branch: str | None = None,
    ) -> TriggerConfig:
        """Build a config from the raw string inputs of the action."""

        return TriggerConfig(
            trigger_phrase=trigger_phrase,
            assignee_trigger=assignee_trigger,
            label_triggers=parse_delimited_list(label_trigger),
            allowed_tools=parse_delimited_list(allowed_tools),
            disallowed_tools=parse_delimited_list(disallowed_tools),
            custom_instructions=custom_instructions,
            direct_prompt=direct_prompt,
            base_branch=base_branch,
        )


@dataclass(frozen=True, slots=True)
class NormalizedContext:
    """Everything the trigger rules need about one invocation."""

    run_id: str
    event_kind: EventKind
    event_action: str | None
    repository_owner: str
    repository_name: str
    actor: str
    entity_number: int
    is_pr: bool
    payload: RawEvent
    config: TriggerConfig = field(default_factory=TriggerConfig)

    @property
    def repository_full_name(self) -> str:
        return f"{self.repository_owner}/{self.repository_name}"


def parse_entity_number(value: object) -> int:
    """Parse a dispatch-supplied number, falling back to 0.

    Accepts ints, floats (truncated) and numeric strings with trailing junk
    (`"42abc"` -> 42). Booleans, containers and other shapes give 0. Never raises.
    """

    if not value or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if not isinstance(value, (str, float)):
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _extract_entity(event: RawEvent) -> tuple[int, bool]:
    if isinstance(event, IssuesEvent):
        return event.issue.number, False
    if isinstance(event, IssueCommentEvent):
        return event.issue.number, event.issue.pull_request is not None
    if isinstance(
        event, (PullRequestEvent, PullRequestReviewEvent, PullRequestReviewCommentEvent)
    ):
        return event.pull_request.number, True
    if isinstance(event, RepositoryDispatchEvent):
        client = event.client_payload
        pr_number = client.pr_number if client is not None else None
        is_pr = client is not None and client.is_pr is True
        return parse_entity_number(pr_number), is_pr or bool(pr_number)
    if isinstance(event, WorkflowDispatchEvent):
        inputs = event.inputs
        pr_number = inputs.pr_number if inputs is not None else None
        is_pr = inputs is not None and inputs.is_pr == "true"
        return parse_entity_number(pr_number), is_pr or bool(pr_number)
    raise UnsupportedEventKind(type(event).__name__)


def normalize_context(
    *,
    run_id: str,
    event_name: str,
    payload: dict[str, Any],
    repository_owner: str,
    repository_name: str,
    actor: str,
    config: TriggerConfig,
) -> NormalizedContext:
    """Build a :class:`NormalizedContext` from a raw event.

    Raises:
        UnsupportedEventKind: for an event name outside the seven supported kinds.
        pydantic.ValidationError: if the payload does not match its kind's shape.
    """

    event = parse_raw_event(event_name, payload)
    entity_number, is_pr = _extract_entity(event)
    action = payload.get("action")

    return NormalizedContext(
        run_id=run_id,
        event_kind=event.kind,
        event_action=action if isinstance(action, str) else None,
        repository_owner=repository_owner,
        repository_name=repository_name,
        actor=actor,
        entity_number=entity_number,
        is_pr=is_pr,
        payload=event,
        config=config,
    )
