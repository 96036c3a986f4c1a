from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from ..core.enums import Collection
from ..storage.document_store import DocumentStore
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

SAMPLE_DATA: Mapping[Collection, list[dict]] = {
    Collection.COURSES: [
        {"name": "Advanced Mathematics", "hours": "2", "minutes": "0", "price": "150.00"},
        {"name": "Quantum Physics", "hours": "1", "minutes": "30", "price": "200.00"},
    ],
    Collection.STUDENTS: [
        {"firstName": "Juan", "lastName": "Perez", "phone": "999111222", "status": "active", "type": "student"},
        {"firstName": "Maria", "lastName": "Garcia", "phone": "999777888", "status": "active", "type": "student"},
    ],
    Collection.TEACHERS: [
        {"firstName": "Carlos", "lastName": "Ruiz", "phone": "999111222", "extra": "Advanced Mathematics", "status": "active", "type": "teacher"},
        {"firstName": "Ana", "lastName": "Belen", "phone": "999333444", "extra": "Quantum Physics", "status": "active", "type": "teacher"},
    ],
}


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if not quote:
                quote = ch
            elif quote == ch:
                quote = ""
            buf.append(ch)
            continue
        if ch == ";" and not quote:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config)), dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Applied schema %s", schema_path)


def list_tables(db_config: Mapping) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def seed_collections(store: DocumentStore, data: Mapping[Collection, list[dict]] = SAMPLE_DATA) -> dict[str, int]:
    """Insert sample records into every collection that is still empty."""

    seeded: dict[str, int] = {}
    for collection, items in data.items():
        if store.list(collection):
            logger.info("%s already has data, skipping", collection.value)
            continue
        for item in items:
            store.add(collection, item)
        seeded[collection.value] = len(items)
        logger.info("Seeded %d %s", len(items), collection.value)
    return seeded
