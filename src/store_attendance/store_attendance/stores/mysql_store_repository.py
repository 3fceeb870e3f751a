from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Store
from .repository import StoreRepository


def _row_to_store(row: dict) -> Store:
    return Store(
        id=row["id"],
        name=row["name"],
        address=row.get("address") or "",
        lat=float(row["lat"]),
        lng=float(row["lng"]),
    )


class MySQLStoreRepository(StoreRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, store_id: str) -> Optional[Store]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, address, lat, lng FROM stores WHERE id=%s", (store_id,))
            row = fetchone(cur)
            return _row_to_store(row) if row else None

    def list_all(self) -> Sequence[Store]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, address, lat, lng FROM stores ORDER BY id")
            return [_row_to_store(r) for r in fetchall(cur)]

    def create(self, store: Store) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO stores(id, name, address, lat, lng) VALUES(%s,%s,%s,%s,%s)",
                (store.id, store.name, store.address, store.lat, store.lng),
            )

    def update(self, store: Store) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE stores SET name=%s, address=%s, lat=%s, lng=%s WHERE id=%s",
                (store.name, store.address, store.lat, store.lng, store.id),
            )
            return cur.rowcount > 0
