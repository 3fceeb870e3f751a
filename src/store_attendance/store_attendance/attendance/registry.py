from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from ..core.constants import FLOW_IDLE_SECONDS, MAX_LIVE_FLOWS
from .flow import AttendanceFlow

logger = logging.getLogger(__name__)


class FlowRegistry:
    """Live attendance flows, one per browser session.

    Flows idle for longer than ``idle_seconds`` are dropped, and past
    ``max_flows`` the least recently used one goes first. Dropped flows are
    closed so their camera lease is released.
    """

    def __init__(
        self,
        factory: Callable[[], AttendanceFlow],
        *,
        idle_seconds: float = FLOW_IDLE_SECONDS,
        max_flows: int = MAX_LIVE_FLOWS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self._idle_seconds = idle_seconds
        self._max_flows = max_flows
        self._clock = clock
        # Least recently used first.
        self._flows: "OrderedDict[str, AttendanceFlow]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _touch(self, flow_id: str) -> None:
        self._flows.move_to_end(flow_id)
        self._last_seen[flow_id] = self._clock()

    def _pop(self, flow_id: str) -> Optional[AttendanceFlow]:
        self._last_seen.pop(flow_id, None)
        return self._flows.pop(flow_id, None)

    def _sweep(self) -> List[AttendanceFlow]:
        evicted = []
        now = self._clock()
        while self._flows:
            oldest = next(iter(self._flows))
            if now - self._last_seen[oldest] <= self._idle_seconds and len(self._flows) <= self._max_flows:
                break
            evicted.append(self._pop(oldest))
        return evicted

    @staticmethod
    def _close_all(flows: List[AttendanceFlow]) -> None:
        for flow in flows:
            flow.close()
        if flows:
            logger.info("evicted %s attendance flows", len(flows))

    def create(self) -> tuple[str, AttendanceFlow]:
        flow_id = uuid.uuid4().hex
        flow = self._factory()
        with self._lock:
            self._flows[flow_id] = flow
            self._touch(flow_id)
            evicted = self._sweep()
        self._close_all(evicted)
        return flow_id, flow

    def get(self, flow_id: Optional[str]) -> Optional[AttendanceFlow]:
        with self._lock:
            evicted = self._sweep()
            flow = self._flows.get(flow_id) if flow_id else None
            if flow is not None:
                self._touch(flow_id)
        self._close_all(evicted)
        return flow

    def get_or_create(self, flow_id: Optional[str]) -> tuple[str, AttendanceFlow]:
        flow = self.get(flow_id)
        if flow is not None:
            return flow_id, flow
        return self.create()

    def discard(self, flow_id: Optional[str]) -> None:
        if not flow_id:
            return
        with self._lock:
            flow = self._pop(flow_id)
        if flow is not None:
            flow.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)
