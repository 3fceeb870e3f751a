from __future__ import annotations

from typing import Sequence

from ..core.enums import ClockType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, to_db_datetime
from ..geo.model import GeoPosition
from .model import TimeLog
from .repository import TimeLogRepository

_COLUMNS = (
    "id, user_id, user_full_name, user_photo_url, store_id, store_name, type, timestamp, "
    "has_incident, incident_detail, identity_score, uniform_compliant, uniform_details, "
    "location_lat, location_lng, location_allowed, distance_to_store"
)


def _row_to_log(r: dict) -> TimeLog:
    location = None
    if r.get("location_lat") is not None and r.get("location_lng") is not None:
        location = GeoPosition(lat=float(r["location_lat"]), lng=float(r["location_lng"]))
    allowed = r.get("location_allowed")
    return TimeLog(
        id=r["id"],
        user_id=r["user_id"],
        user_full_name=r["user_full_name"],
        user_photo_url=r.get("user_photo_url") or "",
        store_id=r.get("store_id"),
        store_name=r.get("store_name"),
        type=ClockType(r["type"]),
        timestamp=as_utc(r["timestamp"]),
        has_incident=bool(r["has_incident"]),
        incident_detail=r.get("incident_detail"),
        identity_score=int(r.get("identity_score") or 0),
        uniform_compliant=bool(r.get("uniform_compliant")),
        uniform_details=r.get("uniform_details"),
        location=location,
        location_allowed=None if allowed is None else bool(allowed),
        distance_to_store=r.get("distance_to_store"),
    )


class MySQLTimeLogRepository(TimeLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, log: TimeLog) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO time_logs({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE id=id
                """,
                (
                    log.id,
                    log.user_id,
                    log.user_full_name,
                    log.user_photo_url,
                    log.store_id,
                    log.store_name,
                    log.type.value,
                    to_db_datetime(log.timestamp),
                    int(log.has_incident),
                    log.incident_detail,
                    log.identity_score,
                    int(log.uniform_compliant),
                    log.uniform_details,
                    log.location.lat if log.location else None,
                    log.location.lng if log.location else None,
                    None if log.location_allowed is None else int(log.location_allowed),
                    log.distance_to_store,
                ),
            )

    def list_all(self) -> Sequence[TimeLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_logs ORDER BY timestamp DESC")
            return [_row_to_log(r) for r in fetchall(cur)]
