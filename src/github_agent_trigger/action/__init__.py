"""Process-boundary components for running as an action step.

Provides:
- Settings loaded from the runner's environment
- Structured logging
- Step output writing
- A small CLI surface
"""
