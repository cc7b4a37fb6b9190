#!/usr/bin/env python3
"""Evaluate a saved webhook payload locally (programmatic example).

This demonstrates using the trigger components directly:

* build a trigger config from raw input strings
* normalize a saved event payload
* print the decision and the reason for it

The event name and payload file are passed as arguments (not read from the
runner's environment).
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from github_agent_trigger.action.logging import configure_logging
from github_agent_trigger.trigger.context import TriggerConfig, normalize_context
from github_agent_trigger.trigger.evaluator import evaluate_trigger


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate trigger rules for a saved event.")
    parser.add_argument("--event-name", required=True, help='Event name, e.g. "issue_comment"')
    parser.add_argument("--payload", required=True, type=Path, help="Path to the event JSON")
    parser.add_argument("--repo", default="owner/repo", help='Repository as "owner/repo"')
    parser.add_argument("--trigger-phrase", default="@claude", help="Trigger phrase")
    parser.add_argument(
        "--labels",
        default="",
        help='Comma-separated label triggers, e.g. "claude,auto-fix" (optional)',
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO")

    owner, _, name = args.repo.partition("/")
    context = normalize_context(
        run_id="local",
        event_name=args.event_name,
        payload=json.loads(args.payload.read_text(encoding="utf-8")),
        repository_owner=owner,
        repository_name=name,
        actor="local-user",
        config=TriggerConfig.from_inputs(
            trigger_phrase=args.trigger_phrase, label_trigger=args.labels
        ),
    )

    decision = evaluate_trigger(context)
    print(f"Entity: #{context.entity_number} ({'PR' if context.is_pr else 'issue'})")
    print(f"Activated: {decision.activated}")
    print(f"Reason: {decision.rationale}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
