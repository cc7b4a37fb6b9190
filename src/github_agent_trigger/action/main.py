"""CLI entrypoint run as a step of the automation job.

`check-trigger` decides whether the bot should run for the current event and
publishes `contains_trigger`. `prepare-context` flattens an activated event into
the record used to build the prompt and publishes it as step outputs.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from pydantic import ValidationError

from github_agent_trigger import __version__
from github_agent_trigger.action.check import check_trigger_action
from github_agent_trigger.action.config import ActionSettings
from github_agent_trigger.action.logging import configure_logging
from github_agent_trigger.action.outputs import OutputWriter
from github_agent_trigger.trigger.context import NormalizedContext, normalize_context
from github_agent_trigger.trigger.events import UnsupportedEventKind
from github_agent_trigger.trigger.prepare import (
    RequiredFieldMissing,
    derive_working_branch,
    prepare_context,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-trigger",
        description="Decide whether the agent should respond to a GitHub event",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-agent-trigger {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "check-trigger",
        help="Evaluate the trigger rules and set the contains_trigger output",
    )

    prepare = subparsers.add_parser(
        "prepare-context",
        help="Flatten the event into prompt-preparation outputs",
    )
    prepare.add_argument(
        "--comment-id",
        default=None,
        help="Id of the tracking comment (defaults to CLAUDE_COMMENT_ID)",
    )
    prepare.add_argument(
        "--derive-branch",
        action="store_true",
        help="Derive a working branch name when CLAUDE_BRANCH is not set",
    )
    prepare.add_argument(
        "--branch-prefix",
        default="claude/",
        help="Prefix for derived working branch names",
    )

    return parser


def _load_context(settings: ActionSettings) -> NormalizedContext:
    return normalize_context(
        run_id=settings.run_id,
        event_name=settings.event_name,
        payload=settings.load_event_payload(),
        repository_owner=settings.repository_owner,
        repository_name=settings.repository_name,
        actor=settings.actor,
        config=settings.trigger_config(),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ActionSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check the action inputs):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, run_id=settings.run_id, event_name=settings.event_name)
    output = OutputWriter(settings.output_path)

    try:
        context = _load_context(settings)

        if args.command == "check-trigger":
            decision = check_trigger_action(
                context, output=output, fallbacks=settings.dispatch_fallbacks()
            )
            print(f"contains_trigger={str(decision.activated).lower()}")
            return 0

        if args.command == "prepare-context":
            working_branch = settings.working_branch
            if not working_branch and args.derive_branch:
                working_branch = derive_working_branch(context, prefix=args.branch_prefix)

            prepared = prepare_context(
                context,
                args.comment_id or settings.comment_id,
                base_branch=settings.base_branch,
                working_branch=working_branch,
            )
            output.set_outputs(prepared.to_outputs())
            logger.info(
                "Prepared context",
                extra={"keys": sorted(prepared.to_outputs())},
            )
            print(json.dumps(asdict(prepared), indent=2, ensure_ascii=False))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (UnsupportedEventKind, RequiredFieldMissing, ValidationError) as e:
        logger.error(str(e), extra={"event": settings.event_name})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
