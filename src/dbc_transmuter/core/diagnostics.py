"""
Ordered, append-only log of problems found while decoding.

Severities:
- info:    affects only the message/signal on the reported line, nothing breaks
- warning: major problem, but only for the message/signal on the reported line
- error:   major problem that can affect several messages/signals
"""

import logging

from ..utils.logging_config import get_logger
from .models import Problem, Severity

logger = get_logger("diagnostics")

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class Diagnostics:
    """Collects Problems in detection order."""

    def __init__(self):
        self._problems: list[Problem] = []

    def __len__(self) -> int:
        return len(self._problems)

    def __iter__(self):
        return iter(self._problems)

    @property
    def problems(self) -> list[Problem]:
        """Return a copy of the collected problems."""
        return list(self._problems)

    def add(self, severity: Severity, line: int, description: str) -> Problem:
        problem = Problem(severity=severity, line=line, description=description)
        self._problems.append(problem)
        logger.log(_LOG_LEVELS[severity], f"Line {line}: {description}")
        return problem

    def info(self, line: int, description: str) -> Problem:
        return self.add(Severity.INFO, line, description)

    def warning(self, line: int, description: str) -> Problem:
        return self.add(Severity.WARNING, line, description)

    def error(self, line: int, description: str) -> Problem:
        return self.add(Severity.ERROR, line, description)
