"""Trigger detection and context normalization.

Everything in this package is a pure function of its inputs: no environment
reads, no I/O. The action layer builds the inputs at the process boundary.
"""

__all__: list[str] = []
