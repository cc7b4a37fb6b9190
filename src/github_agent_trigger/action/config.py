"""Settings for one action run.

Everything the runner hands us arrives as environment variables:
- the ambient run fields (`GITHUB_RUN_ID`, `GITHUB_EVENT_NAME`, `GITHUB_EVENT_PATH`,
  `GITHUB_REPOSITORY`, `GITHUB_ACTOR`, `GITHUB_OUTPUT`)
- the action's configuration (`TRIGGER_PHRASE`, `ASSIGNEE_TRIGGER`, `LABEL_TRIGGER`, ...)
- optional overrides for workflow_dispatch (`INPUT_PR_NUMBER`, `PR_NUMBER`,
  `INPUT_PROMPT`, `PROMPT`)

The settings are read once here, at the process boundary. The trigger core only
ever sees the explicit values built from them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_agent_trigger.trigger.context import DEFAULT_TRIGGER_PHRASE, TriggerConfig
from github_agent_trigger.trigger.evaluator import DispatchFallback


class ActionSettings(BaseSettings):
    """Settings for the trigger action.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ActionSettings(_env_file=path_to_env)`.
    """

    run_id: str = Field(default="", validation_alias="GITHUB_RUN_ID")
    event_name: str = Field(default="", validation_alias="GITHUB_EVENT_NAME")
    event_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_EVENT_PATH",
        description="Path to the JSON file holding the webhook payload",
    )
    repository: str = Field(
        default="",
        validation_alias="GITHUB_REPOSITORY",
        description="Repository in the form 'owner/repo'",
    )
    actor: str = Field(default="", validation_alias="GITHUB_ACTOR")
    output_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_OUTPUT",
        description="File the runner reads step outputs from",
    )

    trigger_phrase: str = Field(default=DEFAULT_TRIGGER_PHRASE, validation_alias="TRIGGER_PHRASE")
    assignee_trigger: str = Field(default="", validation_alias="ASSIGNEE_TRIGGER")
    label_trigger: str = Field(
        default="",
        validation_alias="LABEL_TRIGGER",
        description="Comma-separated or newline-separated label names",
    )
    allowed_tools: str = Field(default="", validation_alias="ALLOWED_TOOLS")
    disallowed_tools: str = Field(default="", validation_alias="DISALLOWED_TOOLS")
    custom_instructions: str = Field(default="", validation_alias="CUSTOM_INSTRUCTIONS")
    direct_prompt: str = Field(default="", validation_alias="DIRECT_PROMPT")
    base_branch: str | None = Field(default=None, validation_alias="BASE_BRANCH")

    working_branch: str | None = Field(default=None, validation_alias="CLAUDE_BRANCH")
    comment_id: str = Field(default="", validation_alias="CLAUDE_COMMENT_ID")

    input_pr_number: str = Field(default="", validation_alias="INPUT_PR_NUMBER")
    env_pr_number: str = Field(default="", validation_alias="PR_NUMBER")
    input_prompt: str = Field(default="", validation_alias="INPUT_PROMPT")
    env_prompt: str = Field(default="", validation_alias="PROMPT")

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("trigger_phrase")
    @classmethod
    def _require_trigger_phrase(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("TRIGGER_PHRASE must not be empty")
        return value

    @property
    def repository_owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repository_name(self) -> str:
        return self.repository.partition("/")[2].rstrip("/")

    def trigger_config(self) -> TriggerConfig:
        return TriggerConfig.from_inputs(
            trigger_phrase=self.trigger_phrase,
            assignee_trigger=self.assignee_trigger,
            label_trigger=self.label_trigger,
            allowed_tools=self.allowed_tools,
            disallowed_tools=self.disallowed_tools,
            custom_instructions=self.custom_instructions,
            direct_prompt=self.direct_prompt,
            base_branch=self.base_branch or None,
        )

    def dispatch_fallbacks(self) -> list[DispatchFallback]:
        """Ordered overrides for workflow_dispatch: action inputs, then environment."""

        return [
            DispatchFallback(
                name="action input",
                pr_number=self.input_pr_number or None,
                prompt=self.input_prompt or None,
            ),
            DispatchFallback(
                name="environment",
                pr_number=self.env_pr_number or None,
                prompt=self.env_prompt or None,
            ),
        ]

    def load_event_payload(self) -> dict[str, Any]:
        """Read the webhook payload the runner wrote to `GITHUB_EVENT_PATH`."""

        if self.event_path is None:
            raise ValueError("GITHUB_EVENT_PATH is required")
        raw = json.loads(self.event_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Event payload must be a JSON object: {self.event_path}")
        return raw
