"""Unit tests for publishing the trigger decision to the runner."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from event_payloads import issue_comment_payload, issue_payload

from github_agent_trigger.action.check import check_trigger_action
from github_agent_trigger.action.logging import JsonFormatter, RunContextFilter
from github_agent_trigger.action.outputs import OutputWriter
from github_agent_trigger.trigger.context import NormalizedContext

MakeContext = Callable[..., NormalizedContext]


def test_output_writer_appends_lines(tmp_path: Path) -> None:
    path = tmp_path / "github_output"
    path.write_text("existing=1\n", encoding="utf-8")
    writer = OutputWriter(path)

    writer.set_output("contains_trigger", "true")
    writer.set_outputs({"pr_number": "12", "is_pr": "true"})

    assert path.read_text(encoding="utf-8").splitlines() == [
        "existing=1",
        "contains_trigger=true",
        "pr_number=12",
        "is_pr=true",
    ]
    assert writer.values["pr_number"] == "12"


def test_output_writer_uses_heredoc_for_multiline(tmp_path: Path) -> None:
    path = tmp_path / "github_output"
    writer = OutputWriter(path)

    writer.set_output("comment_body", "line one\nline two")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("comment_body<<ghadelimiter_")
    assert lines[1:3] == ["line one", "line two"]
    assert lines[3] == lines[0].split("<<", 1)[1]


def test_output_writer_without_path_keeps_values() -> None:
    writer = OutputWriter()

    writer.set_output("contains_trigger", "false")

    assert writer.values == {"contains_trigger": "false"}


def test_output_writer_requires_name() -> None:
    with pytest.raises(ValueError):
        OutputWriter().set_output("", "x")


def test_check_trigger_action_sets_output_and_logs(
    make_context: MakeContext, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "github_output"
    ctx = make_context("issue_comment", issue_comment_payload())

    with caplog.at_level(logging.INFO, logger="github_agent_trigger"):
        decision = check_trigger_action(ctx, output=OutputWriter(path))

    assert decision.activated is True
    assert path.read_text(encoding="utf-8") == "contains_trigger=true\n"
    record = next(r for r in caplog.records if r.message == decision.rationale)
    assert record.activated is True
    assert record.entity_number == 55


def test_check_trigger_action_reports_false(make_context: MakeContext) -> None:
    writer = OutputWriter()
    ctx = make_context("issues", issue_payload(body="nothing to see"))

    decision = check_trigger_action(ctx, output=writer)

    assert decision.activated is False
    assert writer.values == {"contains_trigger": "false"}


def test_json_formatter_includes_run_context_and_extra() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "decided %s", ("yes",), None)
    record.activated = True
    RunContextFilter(run_id="42", event_name="issues").filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "decided yes"
    assert payload["run_id"] == "42"
    assert payload["event_name"] == "issues"
    assert payload["extra"] == {"activated": True}
