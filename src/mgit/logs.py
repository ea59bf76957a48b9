"""Per-package log aggregation.

One LogAggregator is created for every workflow invocation and is never
shared between packages, so it needs no locking.
"""

from __future__ import annotations

from .models import CommandOutcome, LogBundle


class LogAggregator:
    def __init__(self):
        self._info: list[str] = []
        self._error: list[str] = []

    def info(self, message: str):
        self._info.append(message)

    def error(self, message: str):
        self._error.append(message)

    def append(self, outcome: CommandOutcome):
        """Append the lines captured for one command, in order."""
        self._info.extend(outcome.info)
        self._error.extend(outcome.error)

    def concat(self, logs: LogBundle):
        """Append a bundle produced by another workflow (e.g. a clone)."""
        self._info.extend(logs.info)
        self._error.extend(logs.error)

    def snapshot(self) -> LogBundle:
        return LogBundle(info=tuple(self._info), error=tuple(self._error))
