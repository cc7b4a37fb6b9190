"""GitHub Agent Trigger.

Decides whether an automation agent should respond to a GitHub event and
normalizes the event into a single context record:
- seven supported event kinds (issues, comments, pull requests, reviews, dispatches)
- trigger phrase, assignee, label and direct-prompt triggers
- settings loaded from the runner's environment
"""

__version__ = "0.1.0"

from github_agent_trigger.trigger.context import NormalizedContext, TriggerConfig, normalize_context
from github_agent_trigger.trigger.evaluator import TriggerDecision, evaluate_trigger

__all__ = [
    "__version__",
    "NormalizedContext",
    "TriggerConfig",
    "TriggerDecision",
    "evaluate_trigger",
    "normalize_context",
]
