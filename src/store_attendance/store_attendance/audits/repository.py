from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditRecord


class AuditRepository(Protocol):
    def create(self, record: AuditRecord) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[AuditRecord]:
        """All audits, newest first."""
        raise NotImplementedError
