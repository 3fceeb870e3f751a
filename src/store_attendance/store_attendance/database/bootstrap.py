from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable

from .connection import DBConfig, DatabaseConnection

DEMO_STORES = (
    ("STORE-001", "Sucursal Centro", "Av. Corrientes 1234", -34.603722, -58.381592),
    ("STORE-002", "Sucursal Norte", "Av. Santa Fe 4500", -34.576837, -58.423405),
    ("STORE-003", "Sucursal Sur", "Av. Cabildo 2000", -34.561492, -58.456391),
)

DEMO_USERS = (
    {
        "username": "auditor",
        "password": "1234",
        "full_name": "Juan Pérez",
        "role": "auditor",
        "job_title": "Auditor Senior de Campo",
        "photo_url": "https://ui-avatars.com/api/?name=Juan+Perez&background=FF5100&color=fff&size=256",
        "required_uniform": "Buzo o campera negra",
        "assigned_store_ids": ["STORE-001", "STORE-002"],
    },
    {
        "username": "manager",
        "password": "admin",
        "full_name": "Maria González",
        "role": "manager",
        "job_title": "Gerente Regional",
        "photo_url": "https://ui-avatars.com/api/?name=Maria+G&background=0D8ABC&color=fff&size=256",
        "required_uniform": "Saco o ropa formal",
        "assigned_store_ids": ["STORE-001"],
    },
    {
        "username": "admin",
        "password": "admin123",
        "full_name": "Soporte IT",
        "role": "admin",
        "job_title": "Administrador del Sistema",
        "photo_url": "https://ui-avatars.com/api/?name=Admin+IT&background=333&color=fff&size=256",
        "required_uniform": "Sin restricción",
        "assigned_store_ids": [],
    },
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quotes. Line comments are dropped."""
    buf: list[str] = []
    quote = None
    escape = False

    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif quote is not None:
                if ch == quote:
                    quote = None
            elif ch in ("'", '"'):
                quote = ch
            elif ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_directory(db_config: dict) -> None:
    """Insert the demo stores and users unless they already exist."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for store in DEMO_STORES:
            cur.execute("INSERT IGNORE INTO stores(id, name, address, lat, lng) VALUES(%s,%s,%s,%s,%s)", store)
        for user in DEMO_USERS:
            cur.execute(
                """
                INSERT IGNORE INTO users
                    (username, full_name, password, role, job_title, photo_url, required_uniform, assigned_store_ids)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user["username"],
                    user["full_name"],
                    user["password"],
                    user["role"],
                    user["job_title"],
                    user["photo_url"],
                    user["required_uniform"],
                    json.dumps(user["assigned_store_ids"]),
                ),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
