from __future__ import annotations

from typing import Protocol, Sequence

from .model import TimeLog


class TimeLogRepository(Protocol):
    def insert(self, log: TimeLog) -> None:
        """Append a log. Inserting an id that already exists is a no-op."""
        raise NotImplementedError

    def list_all(self) -> Sequence[TimeLog]:
        """All logs, newest first."""
        raise NotImplementedError
