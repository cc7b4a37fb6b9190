"""Write step outputs back to the runner.

The runner exposes a file (named by `GITHUB_OUTPUT`) that steps append
`name=value` lines to. Multi-line values use the heredoc form
`name<<DELIMITER ... DELIMITER`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


class OutputWriter:
    """Append named outputs to the runner's output file.

    With no path (local runs, tests) outputs are only logged and kept in
    :attr:`values`.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self.values: dict[str, str] = {}

    def set_output(self, name: str, value: str) -> None:
        if not name:
            raise ValueError("output name is required")

        self.values[name] = value
        logger.debug("Setting output", extra={"output": name, "value": value})
        if self._path is None:
            return

        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            line = f"{name}={value}\n"

        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(line)

    def set_outputs(self, values: Mapping[str, str]) -> None:
        for name, value in values.items():
            self.set_output(name, value)
