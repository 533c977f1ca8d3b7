from pathlib import Path

from src.participation_tracker.participation_tracker.database.bootstrap import (
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def test_splits_on_semicolons_outside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_escaped_quote_does_not_end_string():
    sql = r"INSERT INTO t VALUES ('it\'s; fine'); SELECT 2;"

    assert list(iter_sql_statements(sql)) == [r"INSERT INTO t VALUES ('it\'s; fine')", "SELECT 2"]


def test_create_database_and_use_are_removed():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE a (id INT);\n"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE a (id INT)"]


def test_line_comments_are_removed():
    sql = "-- header\nCREATE TABLE a (id INT);\n  -- trailing\n"

    assert list(iter_sql_statements(_strip_line_comments(sql))) == ["CREATE TABLE a (id INT)"]


def test_schema_file_defines_attendance_tables():
    sql = _strip_line_comments(_strip_create_db_and_use((DATABASE_DIR / "schema.sql").read_text(encoding="utf-8")))

    statements = list(iter_sql_statements(sql))

    created = " ".join(statements)
    for table in ("class_years", "smallgroups", "students", "attendance_entries", "legacy_attendance"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in created
