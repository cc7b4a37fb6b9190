"""Trigger-phrase matching."""

from __future__ import annotations

import re
from functools import lru_cache

# Characters allowed directly after the phrase (besides end of text).
_TRAILING_BOUNDARY = r"[\s.,!?;:]"


@lru_cache(maxsize=32)
def trigger_phrase_pattern(trigger_phrase: str) -> re.Pattern[str]:
    """Compile the boundary-respecting pattern for a literal trigger phrase.

    The phrase must start the text or follow whitespace, and must end the text
    or be followed by whitespace or one of `.,!?;:`. So `@claude` matches in
    `"hi @claude,"` but not in `"@claudebot"` or `"foo@claude"`.
    """

    return re.compile(rf"(^|\s){re.escape(trigger_phrase)}({_TRAILING_BOUNDARY}|$)")


def contains_trigger_phrase(text: str | None, trigger_phrase: str) -> bool:
    if not trigger_phrase:
        return False
    return trigger_phrase_pattern(trigger_phrase).search(text or "") is not None
