from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import ClockType
from ..geo.model import GeoPosition


@dataclass(frozen=True)
class TimeLog:
    """Domain entity: one completed clock-in/clock-out. Append-only."""

    id: str
    user_id: str
    user_full_name: str
    user_photo_url: str
    type: ClockType
    timestamp: datetime
    has_incident: bool
    identity_score: int
    uniform_compliant: bool
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    incident_detail: Optional[str] = None
    uniform_details: Optional[str] = None
    location: Optional[GeoPosition] = None
    distance_to_store: Optional[int] = None
    location_allowed: Optional[bool] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_full_name": self.user_full_name,
            "user_photo_url": self.user_photo_url,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "type": self.type.value,
            "timestamp": to_iso(self.timestamp),
            "has_incident": self.has_incident,
            "incident_detail": self.incident_detail,
            "identity_score": self.identity_score,
            "uniform_compliant": self.uniform_compliant,
            "uniform_details": self.uniform_details,
            "location": {"lat": self.location.lat, "lng": self.location.lng} if self.location else None,
            "distance_to_store": self.distance_to_store,
            "location_allowed": self.location_allowed,
        }


@dataclass(frozen=True)
class Incident:
    has_incident: bool
    detail: Optional[str] = None
