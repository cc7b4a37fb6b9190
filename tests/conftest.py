"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from github_agent_trigger.trigger.context import (
    NormalizedContext,
    TriggerConfig,
    normalize_context,
)

ContextFactory = Callable[..., NormalizedContext]

ACTION_ENV_VARS = (
    "GITHUB_RUN_ID",
    "GITHUB_EVENT_NAME",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_ACTOR",
    "GITHUB_OUTPUT",
    "TRIGGER_PHRASE",
    "ASSIGNEE_TRIGGER",
    "LABEL_TRIGGER",
    "ALLOWED_TOOLS",
    "DISALLOWED_TOOLS",
    "CUSTOM_INSTRUCTIONS",
    "DIRECT_PROMPT",
    "BASE_BRANCH",
    "CLAUDE_BRANCH",
    "CLAUDE_COMMENT_ID",
    "INPUT_PR_NUMBER",
    "PR_NUMBER",
    "INPUT_PROMPT",
    "PROMPT",
    "LOG_LEVEL",
)


@pytest.fixture
def make_context() -> ContextFactory:
    """Build a NormalizedContext from an event name, payload and config overrides."""

    def _make(
        event_name: str,
        payload: dict[str, Any],
        *,
        actor: str = "test-actor",
        **config: Any,
    ) -> NormalizedContext:
        return normalize_context(
            run_id="1234567890",
            event_name=event_name,
            payload=payload,
            repository_owner="test-owner",
            repository_name="test-repo",
            actor=actor,
            config=TriggerConfig(**config),
        )

    return _make


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Clear action-related environment variables and run from an empty directory."""

    for name in ACTION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
