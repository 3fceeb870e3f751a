"""Great-circle distance between the device and a store, and the geofence rule."""

from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_M, MAX_ALLOWED_DISTANCE_M
from ..core.enums import GeoErrorCode, LocationStatus
from ..core.outcome import Outcome
from .model import DistanceEvaluation, GeoPosition

GEO_ERROR_MESSAGES = {
    GeoErrorCode.PERMISSION_DENIED: "Permiso de ubicación denegado.",
    GeoErrorCode.POSITION_UNAVAILABLE: "Ubicación no disponible.",
    GeoErrorCode.TIMEOUT: "Tiempo de espera agotado.",
    GeoErrorCode.UNSUPPORTED: "Geolocalización no soportada por el navegador.",
    GeoErrorCode.UNKNOWN: "Error obteniendo ubicación.",
}


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in meters between two points given in decimal degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def classify_distance(distance_m: float) -> LocationStatus:
    if distance_m <= MAX_ALLOWED_DISTANCE_M:
        return LocationStatus.OK
    return LocationStatus.FAR


def evaluate_position(position: GeoPosition, store_lat: float, store_lng: float) -> DistanceEvaluation:
    distance = haversine_m(position.lat, position.lng, store_lat, store_lng)
    return DistanceEvaluation(status=classify_distance(distance), position=position, distance_m=distance)


def evaluate_failure(code: GeoErrorCode, message: str | None = None) -> DistanceEvaluation:
    return DistanceEvaluation(
        status=LocationStatus.ERROR,
        error_code=code,
        error_message=message or GEO_ERROR_MESSAGES.get(code, GEO_ERROR_MESSAGES[GeoErrorCode.UNKNOWN]),
    )


def evaluate_outcome(outcome: Outcome[GeoPosition], store_lat: float, store_lng: float) -> DistanceEvaluation:
    """Turn whatever the GPS query produced into a classification. Never raises."""
    if outcome.usable and outcome.value is not None:
        return evaluate_position(outcome.value, store_lat, store_lng)
    try:
        code = GeoErrorCode(outcome.reason or GeoErrorCode.UNKNOWN.value)
    except ValueError:
        code = GeoErrorCode.UNKNOWN
    return evaluate_failure(code)


def parse_geo_error(value: str | None) -> GeoErrorCode:
    """Map browser error names/codes (1, 2, 3 or names) to ``GeoErrorCode``."""
    v = (value or "").strip().upper()
    by_number = {
        "1": GeoErrorCode.PERMISSION_DENIED,
        "2": GeoErrorCode.POSITION_UNAVAILABLE,
        "3": GeoErrorCode.TIMEOUT,
    }
    if v in by_number:
        return by_number[v]
    try:
        return GeoErrorCode(v)
    except ValueError:
        return GeoErrorCode.UNKNOWN
