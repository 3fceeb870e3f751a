from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, dump_json, fetchall, load_json, to_db_datetime
from .model import AuditRecord, AuditReport
from .repository import AuditRepository


def _row_to_audit(r: dict) -> AuditRecord:
    return AuditRecord(
        id=int(r["id"]),
        store_id=r["store_id"],
        user_id=r["user_id"],
        answers=load_json(r.get("answers"), {}),
        photos=load_json(r.get("photos"), {}),
        ai_report=AuditReport.from_payload(load_json(r.get("ai_report"), {"score": r["score"], "summary": ""})),
        score=int(r["score"]),
        created_at=as_utc(r["created_at"]),
    )


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, record: AuditRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audits(store_id, user_id, answers, photos, ai_report, score, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.store_id,
                    record.user_id,
                    dump_json(record.answers),
                    dump_json(record.photos),
                    dump_json(record.ai_report.to_dict()),
                    record.score,
                    to_db_datetime(record.created_at),
                ),
            )
            return int(cur.lastrowid)

    def list_all(self) -> Sequence[AuditRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, store_id, user_id, answers, photos, ai_report, score, created_at
                FROM audits
                ORDER BY created_at DESC, id DESC
                """
            )
            return [_row_to_audit(r) for r in fetchall(cur)]
