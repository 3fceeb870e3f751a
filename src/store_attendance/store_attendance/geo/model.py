from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import GeoErrorCode, LocationStatus


@dataclass(frozen=True)
class GeoPosition:
    """Device position reported at verification time. Never stored on its own."""

    lat: float
    lng: float


@dataclass(frozen=True)
class DistanceEvaluation:
    status: LocationStatus
    position: Optional[GeoPosition] = None
    distance_m: Optional[float] = None
    error_code: Optional[GeoErrorCode] = None
    error_message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.status == LocationStatus.OK

    @property
    def rounded_distance(self) -> Optional[int]:
        if self.distance_m is None:
            return None
        return int(round(self.distance_m))

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "distance_m": self.rounded_distance,
            "position": {"lat": self.position.lat, "lng": self.position.lng} if self.position else None,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": self.error_message,
        }
