"""Publish the trigger decision as the `contains_trigger` step output."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from github_agent_trigger.trigger.context import NormalizedContext
from github_agent_trigger.trigger.evaluator import (
    DispatchFallback,
    TriggerDecision,
    evaluate_trigger,
)

from .outputs import OutputWriter

logger = logging.getLogger(__name__)

CONTAINS_TRIGGER_OUTPUT = "contains_trigger"


def check_trigger_action(
    context: NormalizedContext,
    *,
    output: OutputWriter,
    fallbacks: Sequence[DispatchFallback] = (),
) -> TriggerDecision:
    """Evaluate the trigger rules, log why, and publish `contains_trigger`."""

    decision = evaluate_trigger(context, fallbacks=fallbacks)
    logger.info(
        decision.rationale,
        extra={
            "event_kind": context.event_kind.value,
            "event_action": context.event_action,
            "entity_number": context.entity_number,
            "is_pr": context.is_pr,
            "activated": decision.activated,
        },
    )
    output.set_output(CONTAINS_TRIGGER_OUTPUT, str(decision.activated).lower())
    return decision
