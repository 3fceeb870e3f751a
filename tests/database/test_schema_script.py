from pathlib import Path

from store_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_semicolons_inside_quotes_do_not_split():
    sql = "INSERT INTO t VALUES ('a;b');\n-- comment; here\nSELECT 1;"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_trailing_statement_without_semicolon_is_kept():
    assert list(iter_sql_statements("SELECT 1;\nSELECT 2")) == ["SELECT 1", "SELECT 2"]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE foo;\nUSE foo;\nCREATE TABLE x (id INT);"
    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE x (id INT)"]


def test_schema_creates_every_table():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))
    created = [s.split("(")[0].split()[-1].strip("`") for s in statements if s.upper().startswith("CREATE TABLE")]
    assert sorted(created) == ["audits", "stores", "time_logs", "users"]
