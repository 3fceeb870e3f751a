"""Process-wide view of the time logs.

The view is refreshed wholesale from the repository after each append. A log
whose remote insert failed stays visible locally so the operator still sees
it; that local echo is the only thing merged into the remote snapshot.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List

from ..core.outcome import Outcome
from .model import TimeLog
from .repository import TimeLogRepository

logger = logging.getLogger(__name__)

PERSISTENCE_WARNING = "No se pudo guardar la fichada en el servidor. Quedó registrada localmente."


class AttendanceLedger:
    def __init__(self, repo: TimeLogRepository):
        self._repo = repo
        self._lock = threading.Lock()
        self._remote: List[TimeLog] = []
        self._local_only: Dict[str, TimeLog] = {}
        self._loaded = False

    def refresh(self) -> Outcome[List[TimeLog]]:
        try:
            remote = list(self._repo.list_all())
        except Exception as exc:
            logger.warning("time log refresh failed: %s", exc)
            return Outcome.failed(str(exc))
        with self._lock:
            self._remote = remote
            self._loaded = True
            remote_ids = {log.id for log in remote}
            for log_id in [i for i in self._local_only if i in remote_ids]:
                del self._local_only[log_id]
        return Outcome.success(self.records())

    def records(self) -> List[TimeLog]:
        """All known logs, newest first."""
        if not self._loaded:
            self.refresh()
        with self._lock:
            seen = {log.id for log in self._remote}
            merged = list(self._remote) + [log for log in self._local_only.values() if log.id not in seen]
        merged.sort(key=lambda log: log.timestamp, reverse=True)
        return merged

    def for_user(self, user_id: str) -> List[TimeLog]:
        return [log for log in self.records() if log.user_id == user_id]

    def append(self, log: TimeLog) -> Outcome[TimeLog]:
        # Echo first so the log is visible even if the refresh below is slow or fails.
        with self._lock:
            self._local_only[log.id] = log
        try:
            self._repo.insert(log)
        except Exception as exc:
            logger.warning("time log %s kept locally, remote insert failed: %s", log.id, exc)
            return Outcome.degraded(log, PERSISTENCE_WARNING)

        self.refresh()
        return Outcome.success(log)
