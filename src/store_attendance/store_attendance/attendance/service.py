from __future__ import annotations

from typing import List

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .ledger import AttendanceLedger
from .model import TimeLog


class AttendanceLogService:
    """Use case: browse time logs (admin)."""

    def __init__(self, ledger: AttendanceLedger):
        self._ledger = ledger

    def list_logs(self, *, current_role: Role, incidents_only: bool = False) -> List[TimeLog]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para esta acción")

        self._ledger.refresh()
        logs = self._ledger.records()
        if incidents_only:
            logs = [log for log in logs if log.has_incident]
        return logs
