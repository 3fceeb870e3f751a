"""Which clock action a user may take next ("last log wins")."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..common.datetime_utils import to_iso
from ..core.enums import ClockType
from .model import TimeLog


@dataclass(frozen=True)
class ClockOptions:
    last_log: Optional[TimeLog]

    @property
    def is_clocked_in(self) -> bool:
        return self.last_log is not None and self.last_log.type == ClockType.INGRESO

    @property
    def can_clock_in(self) -> bool:
        return not self.is_clocked_in

    @property
    def can_clock_out(self) -> bool:
        return self.is_clocked_in

    def allows(self, action: ClockType) -> bool:
        if action == ClockType.INGRESO:
            return self.can_clock_in
        return self.can_clock_out

    def to_dict(self) -> dict:
        last = self.last_log
        return {
            "can_clock_in": self.can_clock_in,
            "can_clock_out": self.can_clock_out,
            "last_type": last.type.value if last else None,
            "last_timestamp": to_iso(last.timestamp) if last else None,
            "last_store_name": last.store_name if last else None,
        }


def latest_log(logs: Iterable[TimeLog], user_id: str) -> Optional[TimeLog]:
    own = sorted((log for log in logs if log.user_id == user_id), key=lambda log: log.timestamp, reverse=True)
    return own[0] if own else None


def clock_options(logs: Iterable[TimeLog], user_id: str) -> ClockOptions:
    return ClockOptions(last_log=latest_log(logs, user_id))
